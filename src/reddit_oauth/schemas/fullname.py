"""Helpers for Reddit fullnames.

A fullname names one entity across the API, e.g. ``t3_15bfi0`` for a
link. The core only ever passes them through as cursors; these helpers
exist for endpoint builders that need to address a parent thing.
"""

import re

from .enums import FullnameType

_FULLNAME_RE = re.compile(r"^(t[1-6])_([0-9a-z]+)$")


def make_fullname(kind: FullnameType, thing_id: str) -> str:
    """Build a fullname from a type prefix and a base36 id.

    Raises:
        ValueError: If thing_id is not a lowercase base36 id
    """
    thing_id = thing_id.lower()
    if not re.fullmatch(r"[0-9a-z]+", thing_id):
        raise ValueError(f"Invalid base36 id: {thing_id!r}")
    return f"{kind.value}_{thing_id}"


def split_fullname(fullname: str) -> tuple[FullnameType, str]:
    """Split a fullname into its type and id.

    Raises:
        ValueError: If fullname is not of the form ``t{1-6}_{id}``
    """
    match = _FULLNAME_RE.match(fullname)
    if match is None:
        raise ValueError(f"Invalid fullname: {fullname!r}")
    return FullnameType(match.group(1)), match.group(2)


def is_fullname(value: str, kind: FullnameType | None = None) -> bool:
    """Check whether value is a fullname (optionally of a given type)."""
    try:
        parsed_kind, _ = split_fullname(value)
    except ValueError:
        return False
    return kind is None or parsed_kind is kind
