"""
Centralized validation and sanitization utilities

Provides consistent cleaning of values that are redisplayed by the host
(slugs, file names, free text, URLs) and the credential format check.
"""

import logging
import re
from urllib.parse import urlsplit

logger = logging.getLogger(__name__)

TOKEN_PATTERN = re.compile(r"[A-Za-z0-9_\-]+")

_KEY_DISALLOWED = re.compile(r"[^a-z0-9_\-]")
_TAG_PATTERN = re.compile(r"<[^>]*>")
_WHITESPACE = re.compile(r"\s+")
_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")
_FILE_NAME_SPECIAL_CHARS = set("?[]/\\=<>:;,'\"&$#*()|~`!{}%+’«»”“")
_URL_DISALLOWED = re.compile(r"[^a-zA-Z0-9\-._~:/?#\[\]@!$&'()*+,;=%]")
_ALLOWED_URL_SCHEMES = ("http", "https")


def is_valid_token(token: str | None) -> bool:
    """
    Check that a credential only uses the allow-listed characters

    Args:
        token: Credential value (may be None)

    Returns:
        True if token is non-empty and contains only letters, digits, '-' and '_'
    """
    if not token:
        return False
    return TOKEN_PATTERN.fullmatch(token) is not None


def sanitize_key(key: str) -> str:
    """Lowercase and keep only [a-z0-9_-]"""
    return _KEY_DISALLOWED.sub("", str(key).lower())


def sanitize_text_field(value: str) -> str:
    """
    Reduce a value to a single line of plain text

    Strips markup, control characters and surrounding whitespace, and
    collapses internal whitespace runs to a single space.
    """
    text = _TAG_PATTERN.sub("", str(value))
    text = _CONTROL_CHARS.sub(" ", text)
    return _WHITESPACE.sub(" ", text).strip()


def sanitize_file_name(name: str) -> str:
    """
    Reduce a value to a safe file or folder name

    Removes path separators and shell-special characters, replaces
    whitespace with '-', and trims leading/trailing '.', '-' and '_'.
    """
    cleaned = _CONTROL_CHARS.sub("", str(name))
    cleaned = "".join(ch for ch in cleaned if ch not in _FILE_NAME_SPECIAL_CHARS)
    cleaned = _WHITESPACE.sub("-", cleaned)
    cleaned = re.sub(r"-+", "-", cleaned)
    return cleaned.strip(".-_")


def sanitize_plugin_basename(basename: str) -> str:
    """Sanitize each segment of a host-relative plugin path, keeping the '/' separators"""
    segments = [sanitize_file_name(part) for part in str(basename).split("/")]
    return "/".join(part for part in segments if part)


def esc_url_raw(url: str) -> str:
    """
    Clean a URL for storage

    Returns an empty string for anything that is not an http(s) URL with a host.
    """
    candidate = _URL_DISALLOWED.sub("", str(url).strip())
    if not candidate:
        return ""

    parts = urlsplit(candidate)
    if parts.scheme.lower() not in _ALLOWED_URL_SCHEMES or not parts.netloc:
        logger.debug(f"Rejected URL with unsupported scheme or missing host: {candidate!r}")
        return ""
    return candidate


def is_trusted_package_url(url: str, api_host: str) -> bool:
    """
    Check that a package URL is an HTTPS URL rooted at the trusted API host

    Args:
        url: Candidate package URL
        api_host: Trusted host name (e.g. "api.github.com")

    Returns:
        True if url starts with "https://<api_host>/"
    """
    if not url:
        return False
    return url.startswith(f"https://{api_host}/")
