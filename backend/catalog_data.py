"""Embedded TPL catalogue used when Symphony is unreachable, plus TPL deep links."""

from urllib.parse import quote

TPL_SITE = "https://www.torontopubliclibrary.ca"

LIVE_SOURCE = "Toronto Public Library - Live Data"
FALLBACK_SOURCE = "Enhanced Mock Data (TPL API unavailable)"

POPULAR_COUNT = 5
POPULAR_NOTE = "Popular recommendation - no exact matches found"


def hold_url(title_key: str | None, title: str) -> str:
    """Link for placing a hold; falls back to a title search without a record key."""
    if title_key and title_key != "unknown":
        return f"{TPL_SITE}/detail.jsp?Entt=RDM{quote(str(title_key), safe='')}"
    return f"{TPL_SITE}/search.jsp?Ntt={quote(title, safe='')}"


def catalog_url(title: str) -> str:
    return f"{TPL_SITE}/search.jsp?Ntt={quote(title, safe='')}"


BRANCHES = [
    "Toronto Reference Library",
    "North York Central Library",
    "Scarborough Civic Centre",
    "Etobicoke Civic Centre",
    "Beaches",
    "High Park",
    "Junction",
    "Riverdale",
    "College Shaw",
    "Distillery District",
    "Fort York",
    "Harbourfront",
]


# Order matters: the first POPULAR_COUNT entries double as the no-match list.
FALLBACK_BOOKS = [
    {"title": "The Seven Husbands of Evelyn Hugo", "author": "Taylor Jenkins Reid", "call_number": "FIC REID", "isbn": "9781501161933", "year": 2017, "format": "Book", "subjects": ["fiction", "hollywood", "celebrity", "lgbtq", "romance", "secrets", "glamour"], "description": "A reclusive Hollywood icon finally tells the story of her glamorous and scandalous life."},
    {"title": "Where the Crawdads Sing", "author": "Delia Owens", "call_number": "FIC OWENS", "isbn": "9780735219090", "year": 2018, "format": "Book", "subjects": ["fiction", "mystery", "nature", "coming of age", "southern", "murder", "isolation"], "description": "A girl raised alone in the North Carolina marshes becomes the suspect in a murder."},
    {"title": "The Midnight Library", "author": "Matt Haig", "call_number": "FIC HAIG", "isbn": "9780525559474", "year": 2020, "format": "Book", "subjects": ["fiction", "philosophy", "choices", "regret", "fantasy", "life", "possibilities"], "description": "Between life and death lies a library of every life Nora Seed could have lived."},
    {"title": "Educated", "author": "Tara Westover", "call_number": "B WESTOVER", "isbn": "9780399590504", "year": 2018, "format": "Book", "subjects": ["memoir", "education", "family", "survival", "mormon", "learning"], "description": "A memoir of leaving a survivalist family in Idaho and earning a PhD from Cambridge."},
    {"title": "The Handmaid's Tale", "author": "Margaret Atwood", "call_number": "FIC ATWOOD", "isbn": "9780385490818", "year": 1985, "format": "Book", "subjects": ["dystopian", "feminism", "future", "religion", "oppression", "canadian", "classic"], "description": "Atwood's chilling vision of a totalitarian future society."},
    {"title": "The Sun Also Rises", "author": "Ernest Hemingway", "call_number": "FIC HEMINGWAY", "isbn": "9780743297332", "year": 1926, "format": "Book", "subjects": ["hemingway", "classic", "american", "lost generation", "spain", "bullfighting", "love"], "description": "Expatriates drift from the cafes of Paris to the bullfights of Pamplona after the Great War."},
    {"title": "For Whom the Bell Tolls", "author": "Ernest Hemingway", "call_number": "FIC HEMINGWAY", "isbn": "9780684803357", "year": 1940, "format": "Book", "subjects": ["hemingway", "spanish civil war", "classic", "american", "war", "sacrifice"], "description": "A powerful novel set during the Spanish Civil War."},
    {"title": "A Farewell to Arms", "author": "Ernest Hemingway", "call_number": "FIC HEMINGWAY", "isbn": "9780684801469", "year": 1929, "format": "Book", "subjects": ["hemingway", "world war i", "love", "classic", "american", "tragedy"], "description": "An ambulance driver and a British nurse fall in love on the Italian front."},
    {"title": "Dune", "author": "Frank Herbert", "call_number": "SF HERBERT", "isbn": "9780441172719", "year": 1965, "format": "Book", "subjects": ["science fiction", "space", "politics", "ecology", "epic", "desert", "spice"], "description": "Epic space opera set on the desert planet Arrakis."},
    {"title": "The Martian", "author": "Andy Weir", "call_number": "SF WEIR", "isbn": "9780553418026", "year": 2011, "format": "Book", "subjects": ["science fiction", "mars", "survival", "space", "engineering", "humor"], "description": "Thrilling tale of survival on Mars through science and ingenuity."},
    {"title": "Project Hail Mary", "author": "Andy Weir", "call_number": "SF WEIR", "isbn": "9780593135204", "year": 2021, "format": "Book", "subjects": ["science fiction", "space", "aliens", "humor", "friendship", "science"], "description": "A lone astronaut's mission to save humanity from extinction."},
    {"title": "Clean Code: A Handbook of Agile Software Craftsmanship", "author": "Robert C. Martin", "call_number": "005.1 MARTIN", "isbn": "9780132350884", "year": 2008, "format": "Book", "subjects": ["programming", "software", "clean code", "development", "practices", "coding", "agile"], "description": "Essential guide to writing maintainable, readable code."},
    {"title": "The Pragmatic Programmer: Your Journey to Mastery", "author": "David Thomas", "call_number": "005.1 THOMAS", "isbn": "9780135957059", "year": 2019, "format": "Book", "subjects": ["programming", "software development", "best practices", "coding", "pragmatic"], "description": "Updated classic on software development best practices."},
    {"title": "JavaScript: The Good Parts", "author": "Douglas Crockford", "call_number": "005.133 CROCKFORD", "isbn": "9780596517748", "year": 2008, "format": "Book", "subjects": ["javascript", "programming", "web development", "coding", "js"], "description": "Essential JavaScript knowledge for web developers."},
    {"title": "Python Crash Course", "author": "Eric Matthes", "call_number": "005.133 MATTHES", "isbn": "9781593279288", "year": 2019, "format": "Book", "subjects": ["python", "programming", "coding", "beginner", "tutorial", "computer science"], "description": "A hands-on, project-based introduction to programming."},
    {"title": "Introduction to Algorithms", "author": "Thomas H. Cormen", "call_number": "005.1 CORMEN", "isbn": "9780262033848", "year": 2009, "format": "Book", "subjects": ["algorithms", "computer science", "programming", "data structures", "coding"], "description": "The standard reference on algorithm design and analysis."},
    {"title": "The Thursday Murder Club", "author": "Richard Osman", "call_number": "FIC OSMAN", "isbn": "9781984880987", "year": 2020, "format": "Book", "subjects": ["mystery", "elderly", "crime", "friendship", "humor", "cozy mystery"], "description": "Four retirees who meet weekly to study cold cases find a fresh murder on their doorstep."},
    {"title": "Gone Girl", "author": "Gillian Flynn", "call_number": "FIC FLYNN", "isbn": "9780307588371", "year": 2012, "format": "Book", "subjects": ["thriller", "psychological", "marriage", "mystery", "dark", "twist"], "description": "A wife vanishes on her fifth anniversary and her husband becomes the prime suspect."},
    {"title": "The Girl with the Dragon Tattoo", "author": "Stieg Larsson", "call_number": "FIC LARSSON", "isbn": "9780307269751", "year": 2005, "format": "Book", "subjects": ["thriller", "swedish", "crime", "mystery", "hacking"], "description": "A journalist and a hacker investigate a forty-year-old disappearance."},
    {"title": "Atomic Habits", "author": "James Clear", "call_number": "158.1 CLEAR", "isbn": "9780735211292", "year": 2018, "format": "Book", "subjects": ["self help", "habits", "productivity", "psychology", "behavior", "improvement"], "description": "Small changes, compounded, produce remarkable results."},
    {"title": "Thinking, Fast and Slow", "author": "Daniel Kahneman", "call_number": "153.4 KAHNEMAN", "isbn": "9780374533557", "year": 2011, "format": "Book", "subjects": ["psychology", "thinking", "decision making", "behavioral economics", "cognitive bias"], "description": "The two systems that drive the way we think and decide."},
    {"title": "The Films of Alfred Hitchcock", "author": "David Sterritt", "call_number": "791.43 STERRITT", "isbn": "9780521398145", "year": 1993, "format": "Book", "subjects": ["hitchcock", "film", "cinema", "suspense", "thriller", "director"], "description": "A critical study of the master of suspense and his films."},
    {"title": "Super Mario: How Nintendo Conquered America", "author": "Jeff Ryan", "call_number": "794.8 RYAN", "isbn": "9781591843078", "year": 2011, "format": "Book", "subjects": ["super mario", "nintendo", "gaming", "video games", "mario", "console"], "description": "How a plumber in overalls became the face of a video game empire."},
    {"title": "The Intelligent Investor", "author": "Benjamin Graham", "call_number": "332.6 GRAHAM", "isbn": "9780060555665", "year": 1949, "format": "Book", "subjects": ["investing", "finance", "value investing", "stock market", "warren buffett"], "description": "The definitive book on value investing."},
    {"title": "Good to Great", "author": "Jim Collins", "call_number": "658.4 COLLINS", "isbn": "9780066620992", "year": 2001, "format": "Book", "subjects": ["business", "management", "leadership", "company culture", "success"], "description": "Why some companies make the leap to lasting excellence and others don't."},
    {"title": "The Storied Life of A.J. Fikry", "author": "Gabrielle Zevin", "call_number": "FIC ZEVIN", "isbn": "9781616203221", "year": 2014, "format": "Book", "subjects": ["bookstore", "books", "reading", "literary", "bookseller", "island"], "description": "Heartwarming story of a bookstore owner and the transformative power of books."},
    {"title": "The Little Paris Bookshop", "author": "Nina George", "call_number": "FIC GEORGE", "isbn": "9780553418774", "year": 2013, "format": "Book", "subjects": ["bookstore", "books", "paris", "healing", "literature", "floating bookshop"], "description": "A bookseller on a barge prescribes novels for the ailments of the soul."},
    {"title": "Harry Potter and the Philosopher's Stone", "author": "J.K. Rowling", "call_number": "J ROWLING", "isbn": "9780747532699", "year": 1997, "format": "Book", "subjects": ["harry potter", "magic", "fantasy", "children", "wizard", "hogwarts", "young adult"], "description": "An orphaned boy discovers he is a wizard on his eleventh birthday."},
    {"title": "The Hunger Games", "author": "Suzanne Collins", "call_number": "YA COLLINS", "isbn": "9780439023481", "year": 2008, "format": "Book", "subjects": ["dystopian", "young adult", "survival", "games", "rebellion", "katniss"], "description": "In a ruined North America, teenagers fight to the death on live television."},
]
