import os
from dotenv import load_dotenv

# Load .env from CWD, then package-level .env (first wins)
load_dotenv()
_dotenv_pkg = os.path.join(os.path.dirname(__file__), ".env")
if os.path.exists(_dotenv_pkg):
    load_dotenv(_dotenv_pkg, override=False)

ARXIV_API_URL   = os.getenv("ARXIV_API_URL", "http://export.arxiv.org/api/query").strip()
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "20"))
USER_AGENT      = os.getenv("USER_AGENT", "sciencesnippets/1.0 (research snippet fetcher)").strip()
LOG_LEVEL       = os.getenv("LOG_LEVEL", "INFO").strip().upper()

# Fixed page size; has_more and cursor arithmetic depend on it
PAGE_SIZE = 5

UNKNOWN_TITLE       = "Unknown Title"
NO_ABSTRACT         = "No abstract available."
