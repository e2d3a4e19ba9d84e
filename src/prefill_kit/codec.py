"""
prefill_kit.codec
=================

Build and take apart prefill URLs.

``construct_url`` turns a base URL plus fields into a single URL whose query
string pre-populates the target form; ``parse_url`` is its inverse. Neither
raises on bad input: both return ``None`` and leave it to the caller to
branch before using the result.

Usage::

    from prefill_kit.codec import construct_url, parse_url

    url = construct_url("https://form.gov.sg/abc", [Field("name", "Jane Doe")])
    # "https://form.gov.sg/abc?name=Jane%20Doe"
    parsed = parse_url(url)
    # ParsedUrl(base_url="https://form.gov.sg/abc", params=(Field("name", "Jane Doe"),))

Encoding is not normalized beyond percent-decoding: a URL that spelled a
space as ``+`` comes back from a round trip as ``%20``.
"""

from __future__ import annotations

import re
from typing import Iterable, Optional
from urllib.parse import quote, unquote_plus, urlsplit

from prefill_kit.model.field import Field, ParsedUrl

# Characters encodeURIComponent leaves alone, beyond ASCII alphanumerics.
_URI_COMPONENT_SAFE = "-_.!~*'()"

_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*$")

# Schemes whose URLs are meaningless without a host.
_HOST_REQUIRED_SCHEMES = frozenset({"http", "https", "ftp", "ws", "wss"})

# Characters never valid in a host, beyond whitespace and control characters.
_FORBIDDEN_HOST_CHARS = frozenset("<>\"^|{}\\")


def percent_encode(value: str) -> str:
    """Percent-encode *value* for use as a query-string value."""
    return quote(value, safe=_URI_COMPONENT_SAFE)


# ── construct ───────────────────────────────────────────────────────


def construct_url(base_url: str, fields: Iterable[Field]) -> Optional[str]:
    """Append *fields* to *base_url* as ``id=value`` query parameters.

    Fields with an empty id or value are skipped. Returns ``None`` when
    nothing is left to encode. Ids are written as given; values are
    percent-encoded. Duplicate ids are all emitted in order.
    """
    valid = [f for f in fields if f.is_prefillable]
    if not valid:
        return None

    query = "&".join(f"{f.id}={percent_encode(f.value)}" for f in valid)
    connector = "&" if "?" in base_url else "?"
    return f"{base_url}{connector}{query}"


# ── parse / validate ────────────────────────────────────────────────


def _host_ok(hostname: str) -> bool:
    """Reject hosts a browser's URL parser would refuse."""
    for c in hostname:
        if c in _FORBIDDEN_HOST_CHARS or c.isspace() or ord(c) < 0x20 or ord(c) == 0x7F:
            return False
    if not hostname.isascii():
        try:
            hostname.encode("idna")
        except UnicodeError:
            return False
    return True


def _split_absolute(url: str):
    """Return ``urlsplit(url)`` if *url* is absolute, else ``None``."""
    if not isinstance(url, str):
        return None
    candidate = url.strip()
    if not candidate:
        return None
    try:
        parts = urlsplit(candidate)
        # Accessing .port validates it (raises ValueError when out of range).
        _ = parts.port
    except ValueError:
        return None

    if not parts.scheme or not _SCHEME_RE.match(parts.scheme):
        return None
    if parts.hostname and not _host_ok(parts.hostname):
        return None
    if parts.scheme.lower() in _HOST_REQUIRED_SCHEMES:
        if not parts.hostname:
            return None
    elif not (parts.netloc or parts.path):
        return None
    return parts


def validate_url(url: str) -> bool:
    """True if *url* parses as an absolute URL."""
    return _split_absolute(url) is not None


def _parse_query(query: str) -> tuple[Field, ...]:
    params: list[Field] = []
    for pair in query.split("&"):
        if not pair:
            continue
        key, _, value = pair.partition("=")
        params.append(Field(id=key, value=unquote_plus(value)))
    return tuple(params)


def parse_url(url: str) -> Optional[ParsedUrl]:
    """Split a prefill URL into its base URL and ordered fields.

    Returns ``None`` when *url* is not an absolute URL. The base URL keeps
    scheme, host, port and path; credentials, query and fragment are
    dropped. Values are percent-decoded, keys are kept verbatim and
    repeated keys stay separate entries.
    """
    parts = _split_absolute(url)
    if parts is None:
        return None

    host = parts.netloc.rpartition("@")[2]
    if parts.netloc:
        base_url = f"{parts.scheme}://{host}{parts.path}"
    else:
        base_url = f"{parts.scheme}:{parts.path}"
    return ParsedUrl(base_url=base_url, params=_parse_query(parts.query))
