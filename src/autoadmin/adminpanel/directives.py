"""
Per-field directive strings.

A directive string looks like ``listDisplay:exclude;required;max:120`` and is
attached to a field (``metadata={"admin": ...}`` on a dataclass field,
``info={"admin": ...}`` on a SQLAlchemy column). This module resolves the
inclusion flags and the display name; widget keys are read by the
field-config builder.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Tuple

from autoadmin.exceptions import InvalidDirective
from autoadmin.utils import humanize_name

INCLUDE = "include"
EXCLUDE = "exclude"

# directive key -> DirectiveOptions attribute
INCLUSION_KEYS = {
    "listDisplay": "include_in_list_display",
    "listFetch": "include_in_list_fetch",
    "search": "include_in_search",
    "view": "include_in_instance_view",
    "addForm": "include_in_add_form",
    "editForm": "include_in_edit_form",
}


@dataclass(frozen=True)
class DirectiveOptions:
    include_in_list_display: bool = True
    include_in_list_fetch: bool = True
    include_in_search: bool = True
    include_in_instance_view: bool = True
    include_in_add_form: bool = True
    include_in_edit_form: bool = True
    display_name: str = ""


def iter_directives(raw: str) -> Iterator[Tuple[str, str]]:
    """Yield ``(key, value)`` pairs; a bare key yields ``(key, "")``."""
    if not raw:
        return
    for token in raw.split(";"):
        if not token:
            continue
        key, _, value = token.partition(":")
        yield key, value


def get_directive(raw: str, key: str):
    """Return the value of the last occurrence of ``key``, or None."""
    found = None
    for k, v in iter_directives(raw):
        if k == key:
            found = v
    return found


def has_directive(raw: str, key: str) -> bool:
    return any(k == key for k, _ in iter_directives(raw))


def parse_directives(raw: str, field_name: str, primary_key: bool = False) -> DirectiveOptions:
    flags = {attr: True for attr in INCLUSION_KEYS.values()}
    display_name = humanize_name(field_name)
    list_fetch_present = False

    for key, value in iter_directives(raw):
        if key == "displayName":
            display_name = value
            continue
        attr = INCLUSION_KEYS.get(key)
        if attr is None:
            continue
        if value == INCLUDE:
            flags[attr] = True
        elif value == EXCLUDE:
            flags[attr] = False
        else:
            raise InvalidDirective(key, value, field=field_name)
        if key == "listFetch":
            list_fetch_present = True

    if not list_fetch_present:
        if primary_key:
            flags["include_in_list_fetch"] = True
        else:
            flags["include_in_list_fetch"] = flags["include_in_list_display"]

    return DirectiveOptions(display_name=display_name, **flags)
