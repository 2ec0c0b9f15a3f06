import requests
from playwright.sync_api import Error as PlaywrightError, sync_playwright

from bayevents import config


def fetch_html(url, params=None):
    """
    GET a page and return its text.
    Returns None on network error or a non-success status; no retries.
    """
    try:
        resp = requests.get(
            url,
            params=params,
            headers=config.REQUEST_HEADERS,
            timeout=config.REQUEST_TIMEOUT,
        )
        resp.raise_for_status()
        return resp.text
    except requests.exceptions.RequestException as e:
        print(f"    Fetch failed for {url}: {e}")
        return None


def fetch_json(url, params=None):
    """GET a JSON document. Returns None on any fetch or decode failure."""
    try:
        resp = requests.get(
            url,
            params=params,
            headers={**config.REQUEST_HEADERS, "Accept": "application/json"},
            timeout=config.REQUEST_TIMEOUT,
        )
        resp.raise_for_status()
        return resp.json()
    except requests.exceptions.RequestException as e:
        print(f"    Fetch failed for {url}: {e}")
        return None
    except ValueError as e:
        print(f"    Invalid JSON from {url}: {e}")
        return None


def render_page(url, settle_ms=None, timeout_ms=None):
    """
    Load a page in headless Chromium and return the settled HTML.
    One browser per call, always closed before returning. Returns None if
    the browser can't be launched or the page fails to load.
    """
    settle_ms = config.RENDER_SETTLE_MS if settle_ms is None else settle_ms
    timeout_ms = timeout_ms or config.RENDER_TIMEOUT_MS

    try:
        with sync_playwright() as p:
            browser = p.chromium.launch(
                headless=True,
                args=["--no-sandbox", "--disable-setuid-sandbox"],
            )
            try:
                page = browser.new_page(viewport={"width": 1920, "height": 1080})
                page.set_extra_http_headers({
                    "Accept-Language": config.REQUEST_HEADERS["Accept-Language"],
                })
                page.goto(url, wait_until="networkidle", timeout=timeout_ms)
                page.wait_for_timeout(settle_ms)
                # Lazy-loaded cards only appear after a scroll
                page.evaluate("window.scrollTo(0, document.body.scrollHeight)")
                page.wait_for_timeout(min(settle_ms, 3000))
                return page.content()
            finally:
                browser.close()
    except PlaywrightError as e:
        print(f"    Render failed for {url}: {str(e)[:200]}")
        return None
