"""
Header helpers shared by the request decoder and response encoder.

Comma-joining is the standard HTTP convention for folding repeated fields into
one line. Fields whose single values contain commas are never split.
"""

import re
from typing import Dict, Iterable, List, Tuple

NON_SPLITTABLE_HEADERS = frozenset(
    {
        "authorization",
        "cookie",
        "date",
        "expires",
        "if-modified-since",
        "if-unmodified-since",
        "last-modified",
        "proxy-authorization",
        "retry-after",
        "set-cookie",
        "user-agent",
    }
)

# RFC 9110 token characters.
_TOKEN_RE = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")
# Field values may contain HTAB and visible/obs-text characters, nothing else below 0x20.
_INVALID_VALUE_RE = re.compile(r"[\x00-\x08\x0a-\x1f\x7f]")


def split_header_value(name: str, value: str) -> List[str]:
    """
    Split a comma-joined field value back into its members.

    Commas inside double-quoted strings do not separate members.
    """
    if name.lower() in NON_SPLITTABLE_HEADERS:
        return [value]

    members: List[str] = []
    current: List[str] = []
    in_quotes = False
    escaped = False
    for ch in value:
        if escaped:
            current.append(ch)
            escaped = False
        elif ch == "\\" and in_quotes:
            current.append(ch)
            escaped = True
        elif ch == '"':
            current.append(ch)
            in_quotes = not in_quotes
        elif ch == "," and not in_quotes:
            members.append("".join(current).strip())
            current = []
        else:
            current.append(ch)
    members.append("".join(current).strip())

    # Empty members ("a, , b") are dropped; an entirely empty value is kept.
    non_empty = [m for m in members if m]
    return non_empty or [value.strip()]


def group_headers(pairs: Iterable[Tuple[str, str]]) -> Dict[str, List[str]]:
    """
    Group pairs case-insensitively, keeping the first-seen casing as the key
    and every value in order.
    """
    grouped: Dict[str, List[str]] = {}
    casing: Dict[str, str] = {}
    for name, value in pairs:
        key = casing.setdefault(name.lower(), name)
        grouped.setdefault(key, []).append(value)
    return grouped


def is_valid_header_name(name: str) -> bool:
    return _TOKEN_RE.fullmatch(name) is not None


def is_valid_header_value(value: str) -> bool:
    return _INVALID_VALUE_RE.search(value) is None
