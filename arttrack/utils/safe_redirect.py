"""Redirect targets after login must stay on this site."""

from urllib.parse import urlparse


def safe_redirect_url(url: str, fallback: str = "/") -> str:
    """Return url if it is a relative path on this site, else fallback.

    Browsers treat "//host" and "/\\host" as another origin, so both are
    rejected along with anything carrying a scheme or host.
    """
    if not url or not isinstance(url, str):
        return fallback

    url = url.strip()
    if not url.startswith("/") or url.startswith("//") or url.startswith("/\\"):
        return fallback

    parsed = urlparse(url)
    if parsed.scheme or parsed.netloc:
        return fallback

    # Never bounce back into the auth pages themselves
    if parsed.path in ("/login", "/register", "/logout"):
        return fallback

    return url
