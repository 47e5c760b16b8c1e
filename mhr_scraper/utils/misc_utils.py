# mhr_scraper/utils/misc_utils.py
from typing import Optional
from urllib.parse import urldefrag, urljoin, urlsplit, urlunsplit


def normalize_url(url: str) -> str:
    """Returns a stable key for a URL: trimmed, fragment dropped, scheme/host lowercased."""
    url, _ = urldefrag(url.strip())
    parts = urlsplit(url)
    return urlunsplit(
        (parts.scheme.lower(), parts.netloc.lower(), parts.path, parts.query, "")
    )


def absolute_url(base_url: str, href: Optional[str]) -> Optional[str]:
    """Resolves ``href`` against ``base_url`` the way a browser's ``.href`` would."""
    if href is None:
        return None
    href = href.strip()
    if not href:
        return None
    return urljoin(base_url, href)


def truncate(text: Optional[str], limit: int) -> str:
    return (text or "")[:limit]
