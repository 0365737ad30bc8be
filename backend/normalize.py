"""Map Symphony search records onto BookRecord.

Symphony responses differ between service versions, so every field is looked up
through an ordered list of dotted paths and the first non-empty value wins.
Nothing here raises on a malformed record; missing data degrades to
placeholders.
"""

import logging
import math
import re

from catalog_data import LIVE_SOURCE, catalog_url, hold_url
from models import AvailabilityInfo, BookRecord, BranchHolding

logger = logging.getLogger(__name__)

RECORD_LIST_KEYS = ("results", "titleInfo", "records", "entries")
HOLDINGS_KEYS = ("holdings", "copyInfo", "items", "availability")

TITLE_PATHS = ("title", "titleInfo.title", "marc.245a")
AUTHOR_PATHS = ("author", "authorInfo.author", "marc.100a", "marc.110a")
CALL_NUMBER_PATHS = ("callNumber", "callInfo.callNumber", "marc.090a", "marc.050a")
ISBN_PATHS = ("isbn", "standardNumbers.isbn", "marc.020a")
YEAR_PATHS = ("publishYear", "publication.year", "marc.260c")
FORMAT_PATHS = ("format", "formatInfo.format", "materialType")
TITLE_KEY_PATHS = ("titleKey", "id", "recordId")

HOLDING_COPIES_PATHS = ("copies", "totalCopies")
HOLDING_AVAILABLE_PATHS = ("available", "availableCopies")
HOLDING_BRANCH_PATHS = ("library", "branch", "location")

UNKNOWN_TITLE = "Unknown Title"
UNKNOWN_AUTHOR = "Unknown Author"
NO_CALL_NUMBER = "No Call Number"
DEFAULT_FORMAT = "Book"
DEFAULT_BRANCH = "Toronto Public Library"
MULTIPLE_LOCATIONS = "Multiple Locations"

# MARC subfield delimiters that leak into Symphony text fields.
_MARC_DELIMITERS = re.compile(r"[|\[\]/]")
_WHITESPACE = re.compile(r"\s+")
_NON_DIGITS = re.compile(r"\D")
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def get_nested_value(obj, path: str):
    current = obj
    for key in path.split("."):
        if isinstance(current, dict):
            current = current.get(key)
        elif isinstance(current, list) and key.isdigit() and int(key) < len(current):
            current = current[int(key)]
        else:
            return None
        if current is None:
            return None
    return current


def extract_field(item, paths) -> str | None:
    """First candidate path holding a non-empty string (numbers count)."""
    for path in paths:
        value = get_nested_value(item, path)
        if isinstance(value, bool):
            continue
        if isinstance(value, (int, float)):
            return str(value)
        if isinstance(value, str) and value.strip():
            return value
    return None


def clean_text(text: str | None) -> str | None:
    if text is None:
        return None
    text = _MARC_DELIMITERS.sub("", str(text))
    return _WHITESPACE.sub(" ", text).strip()


def extract_year(raw) -> int | None:
    """'c2008].' -> 2008. No digits at all -> None."""
    if raw is None:
        return None
    digits = _NON_DIGITS.sub("", str(raw))
    if not digits:
        return None
    return int(digits[:4])


def _parse_count(raw, default: int) -> int:
    if isinstance(raw, bool) or raw is None:
        return default
    if isinstance(raw, float) and not math.isfinite(raw):
        return default
    if isinstance(raw, (int, float)):
        return int(raw)
    m = _LEADING_INT.match(str(raw))
    return int(m.group(1)) if m else default


def _first_count(holding: dict, paths, default: int) -> int:
    # A zero or blank earlier path falls through to the next one.
    for path in paths:
        value = _parse_count(holding.get(path), 0)
        if value:
            return value
    return default


def default_availability(branch: str | None = None) -> AvailabilityInfo:
    return AvailabilityInfo(
        status="unknown",
        total_copies=1,
        available_copies=0,
        message="Availability information not available from TPL API",
        branch_holdings=[BranchHolding(branch=branch or DEFAULT_BRANCH, total_copies=1, available_copies=0, status="unknown")],
    )


def _find_holdings(item: dict):
    for key in HOLDINGS_KEYS:
        if key in item and item[key] is not None:
            return item[key]
    return None


def extract_availability(item, requested_branch: str | None = None) -> AvailabilityInfo:
    holdings = _find_holdings(item) if isinstance(item, dict) else None
    if not isinstance(holdings, list) or not holdings:
        return default_availability(requested_branch)

    total = 0
    available = 0
    branch_holdings: list[BranchHolding] = []
    for holding in holdings:
        if not isinstance(holding, dict):
            continue
        copies = max(_first_count(holding, HOLDING_COPIES_PATHS, 1), 0)
        avail = min(max(_first_count(holding, HOLDING_AVAILABLE_PATHS, 0), 0), copies)
        branch = clean_text(extract_field(holding, HOLDING_BRANCH_PATHS)) or "Unknown Branch"
        total += copies
        available += avail
        branch_holdings.append(BranchHolding(
            branch=branch,
            total_copies=copies,
            available_copies=avail,
            status="available" if avail > 0 else "checked_out",
        ))

    if not branch_holdings:
        return default_availability(requested_branch)

    if requested_branch and requested_branch.lower() != "all":
        wanted = requested_branch.lower()
        match = next((h for h in branch_holdings if wanted in h.branch.lower()), None)
        if match:
            if match.available_copies > 0:
                message = f"{match.available_copies} of {match.total_copies} copies available at {match.branch}"
            else:
                message = f"All copies checked out at {match.branch}. Place a hold?"
            return AvailabilityInfo(
                status="available" if match.available_copies > 0 else "on_hold",
                total_copies=match.total_copies,
                available_copies=match.available_copies,
                message=message,
                branch_holdings=[match],
            )

    if available > 0:
        message = f"{available} of {total} copies available across TPL system"
    else:
        message = f"All {total} copies checked out. Place a hold?"
    return AvailabilityInfo(
        status="available" if available > 0 else "on_hold",
        total_copies=total,
        available_copies=available,
        message=message,
        branch_holdings=branch_holdings,
    )


def describe(title: str, author: str, fmt: str | None, year: int | None) -> str:
    parts = []
    if fmt and fmt != DEFAULT_FORMAT:
        parts.append(fmt)
    if author and author != UNKNOWN_AUTHOR:
        parts.append(f"by {author}")
    if year:
        parts.append(f"({year})")
    return " ".join(parts) if parts else f"{fmt or DEFAULT_FORMAT} from Toronto Public Library"


def extract_records(payload) -> list:
    """Record list from a Symphony search response, whichever key carries it."""
    if not isinstance(payload, dict):
        return []
    for key in RECORD_LIST_KEYS:
        if key in payload:
            records = payload[key]
            return records if isinstance(records, list) else []
    return []


def normalize_record(item, index: int = 0, branch: str | None = None) -> BookRecord:
    if not isinstance(item, dict):
        logger.warning(f"[Normalize] record {index} is {type(item).__name__}, using placeholders")
        item = {}

    title = clean_text(extract_field(item, TITLE_PATHS)) or UNKNOWN_TITLE
    author = clean_text(extract_field(item, AUTHOR_PATHS)) or UNKNOWN_AUTHOR
    call_number = clean_text(extract_field(item, CALL_NUMBER_PATHS)) or NO_CALL_NUMBER
    isbn = clean_text(extract_field(item, ISBN_PATHS)) or None
    year = extract_year(extract_field(item, YEAR_PATHS))
    fmt = clean_text(extract_field(item, FORMAT_PATHS)) or DEFAULT_FORMAT
    record_key = extract_field(item, TITLE_KEY_PATHS)
    title_key = record_key or f"tpl_{index}"

    return BookRecord(
        id=f"tpl_{title_key}",
        title=title,
        author=author,
        isbn=isbn,
        publish_year=year,
        call_number=call_number,
        format=fmt,
        description=describe(title, author, fmt, year),
        availability=extract_availability(item, branch),
        branch=branch or MULTIPLE_LOCATIONS,
        hold_url=hold_url(record_key, title),
        catalog_url=catalog_url(title),
        source=LIVE_SOURCE,
    )


def normalize_response(payload, branch: str | None = None) -> list[BookRecord]:
    return [normalize_record(item, i, branch) for i, item in enumerate(extract_records(payload))]
