from __future__ import annotations

import logging
import re
from typing import Optional

import requests
from bs4 import BeautifulSoup

from notedeck.settings import APP_NAME, TITLE_FETCH_TIMEOUT_S

log = logging.getLogger(__name__)

MAX_HTML_BYTES = 2_000_000
_WS_RE = re.compile(r"\s+")


def is_http_url(text: str) -> bool:
    text = (text or "").strip().lower()
    return text.startswith("http://") or text.startswith("https://")


def extract_title(html_content: str) -> Optional[str]:
    """
    Page title from raw HTML: <title> first, then <meta property="og:title">.
    Whitespace is collapsed; empty titles count as missing.
    """
    soup = BeautifulSoup(html_content or "", "html.parser")

    candidates = []
    if soup.title is not None and soup.title.string:
        candidates.append(soup.title.string)
    og = soup.find("meta", attrs={"property": "og:title"})
    if og is not None and og.get("content"):
        candidates.append(og["content"])

    for raw in candidates:
        title = _WS_RE.sub(" ", str(raw)).strip()
        if title:
            return title
    return None


def fetch_title(
    url: str,
    *,
    timeout: float = TITLE_FETCH_TIMEOUT_S,
    session: Optional[requests.Session] = None,
) -> Optional[str]:
    """
    Resolve the title of the page at `url`. Never raises: any failure
    (non-HTTP url, network error, non-HTML response, no title) gives None.
    """
    url = (url or "").strip()
    if not is_http_url(url):
        return None

    getter = session.get if session is not None else requests.get
    try:
        resp = getter(
            url,
            timeout=timeout,
            headers={"User-Agent": f"{APP_NAME} title-fetch"},
            stream=True,
        )
    except requests.RequestException as exc:
        log.info("Title fetch failed: url=%s (%s)", url, exc)
        return None

    try:
        with resp:
            resp.raise_for_status()
            content_type = resp.headers.get("content-type", "text/html").split(";")[0].strip()
            if content_type not in ("text/html", "application/xhtml+xml"):
                log.debug("Title fetch skipped: url=%s content_type=%s", url, content_type)
                return None

            chunks: list[bytes] = []
            downloaded = 0
            for chunk in resp.iter_content(chunk_size=65536):
                chunks.append(chunk)
                downloaded += len(chunk)
                if downloaded >= MAX_HTML_BYTES:
                    break
            raw = b"".join(chunks)[:MAX_HTML_BYTES]
            content = raw.decode(resp.encoding or "utf-8", errors="replace")
    except (requests.RequestException, LookupError) as exc:
        log.info("Title fetch failed: url=%s (%s)", url, exc)
        return None

    title = extract_title(content)
    log.debug("Title fetched: url=%s title=%r", url, title)
    return title
