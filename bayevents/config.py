import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

REPO_ROOT = Path(__file__).resolve().parents[1]
OUTPUT_DIR = Path(os.environ.get("OUTPUT_DIR", REPO_ROOT / "public"))
EVENTS_PATH = OUTPUT_DIR / "events.json"
INDEX_PATH = OUTPUT_DIR / "index.html"
STATUS_PATH = OUTPUT_DIR / "scrape-status.json"
LOG_PATH = OUTPUT_DIR / "scrape-log.txt"

LOG_RETENTION_DAYS = int(os.environ.get("LOG_RETENTION_DAYS", "14"))

TIMEZONE = "America/Los_Angeles"

REQUEST_TIMEOUT = int(os.environ.get("REQUEST_TIMEOUT", "30"))
RENDER_TIMEOUT_MS = REQUEST_TIMEOUT * 1000
RENDER_SETTLE_MS = int(os.environ.get("RENDER_SETTLE_MS", "5000"))
REQUEST_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36",
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}

NINETEENHZ_URL = os.environ.get("NINETEENHZ_URL", "https://19hz.info/eventlisting_BayArea.php")
FOOPEE_URL = os.environ.get("FOOPEE_URL", "http://www.foopee.com/punk/the-list/by-date.{}.html")
FOOPEE_WEEKS = int(os.environ.get("FOOPEE_WEEKS", "8"))
PARTIFUL_URL = os.environ.get("PARTIFUL_URL", "https://partiful.com/discover/sf")
DICE_API_URL = os.environ.get("DICE_API_URL", "https://events-api.dice.fm/v1/events")
DICE_CITY = os.environ.get("DICE_CITY", "San Francisco")
DICE_DATE_WINDOWS = ["this_week", "next_week", "this_month"]
POSH_EXPLORE_URL = os.environ.get(
    "POSH_EXPLORE_URL",
    "https://posh.vip/explore?location=%7B%22type%22%3A%22custom%22%2C%22location%22%3A%22San+Francisco%2C+CA%2C+USA%22%2C%22long%22%3A-122.4194155%2C%22lat%22%3A37.7749295%7D",
)

SOURCES = ["nineteenhz", "foopee", "partiful", "dice", "poshvip"]
ENABLED_SOURCES = [
    s.strip() for s in os.environ.get("ENABLED_SOURCES", ",".join(SOURCES)).split(",") if s.strip()
]

CATEGORIES = ["electronic", "live"]
REQUIRED_FIELDS = ["date", "source", "title"]
