"""Client for the TPL catalogue's Symphony Web Services search endpoint."""

import logging

import httpx

logger = logging.getLogger(__name__)

SEARCH_PATH = "/symws/catalog/search"
DEFAULT_PARAMS = {
    "ct": "json",
    "rw": 8,
    "fmt": "json",
    "rt": "title",
}
HEADERS = {
    "Accept": "application/json",
    "User-Agent": "TPL-Search-Enhanced/1.0 (FastAPI)",
}


class CatalogueUnavailable(Exception):
    """The live catalogue could not produce a usable response."""


class SymphonyClient:
    def __init__(self, base_url: str, timeout: float = 8.0, transport: httpx.AsyncBaseTransport | None = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def search(self, query: str, branch: str | None = None) -> dict:
        """One GET, no retry. Raises CatalogueUnavailable on any failure."""
        params = {**DEFAULT_PARAMS, "q": query}
        if branch:
            params["lib"] = branch
        url = f"{self.base_url}{SEARCH_PATH}"
        logger.info(f"[Symphony] searching '{query}' at branch={branch or 'all'}")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                res = await client.get(url, params=params, headers=HEADERS)
                res.raise_for_status()
                data = res.json()
        except httpx.TimeoutException as e:
            raise CatalogueUnavailable(f"timed out after {self.timeout}s") from e
        except httpx.HTTPStatusError as e:
            raise CatalogueUnavailable(f"Symphony API error: {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise CatalogueUnavailable(f"request failed: {e}") from e
        except ValueError as e:
            raise CatalogueUnavailable("response was not valid JSON") from e

        if not isinstance(data, dict):
            raise CatalogueUnavailable(f"unexpected response body: {type(data).__name__}")
        return data
