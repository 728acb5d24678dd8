"""Percent-encoding and form parsing used by OAuth 1.0a (RFC 5849 §3.6)."""

from urllib.parse import quote


# RFC 3986 unreserved characters; quote() already leaves ALPHA / DIGIT / "-._" alone.
_SAFE = "~"


def percent_encode(value: str) -> str:
    """Percent-encode a value according to RFC 5849 §3.6.

    Encodes all characters except unreserved: A-Z, a-z, 0-9, -, ., _, ~
    Non-ASCII characters are UTF-8 encoded first; hex digits are uppercase.
    """
    return quote(str(value), safe=_SAFE, encoding="utf-8", errors="strict")


def parse_form_encoded(text: str) -> dict[str, str]:
    """Split an ``&``-joined ``key=value`` string into a dictionary.

    Values are taken verbatim, without percent-decoding. Items lacking ``=``
    or with an empty key are ignored; later duplicates win.
    """
    params: dict[str, str] = {}
    for item in text.split("&"):
        key, sep, value = item.partition("=")
        if not sep or not key:
            continue
        params[key] = value
    return params
