from __future__ import annotations

import re

_URL_SAFE = re.compile(r"^[A-Za-z0-9_.~-]+$")
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def is_url_safe(name: str) -> bool:
    """True when ``name`` can be used verbatim as a URL path segment."""
    return bool(name) and bool(_URL_SAFE.fullmatch(name))


def humanize_name(name: str) -> str:
    """
    Turn an identifier into a label.

    ``first_name`` -> ``First Name``, ``createdAt`` -> ``Created At``,
    ``HTTPStatus`` -> ``HTTP Status``, ``id`` -> ``ID``.
    """
    if not name:
        return ""
    words = []
    for chunk in re.split(r"[_\-\s]+", name):
        if not chunk:
            continue
        words.extend(_CAMEL_BOUNDARY.split(chunk))
    out = []
    for word in words:
        if word.lower() == "id":
            out.append("ID")
        elif word.isupper():
            out.append(word)
        else:
            out.append(word[:1].upper() + word[1:])
    return " ".join(out)
