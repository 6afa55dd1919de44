"""Canonical field names for HR API rows.

The HR API is inconsistent about key casing (``employeeNo``, ``ServiceLineId``,
``SL_NO``...). Every row is folded onto one canonical spelling before anything
else looks at it: a trailing ``Id`` becomes ``ID`` and the whole key is
uppercased, so ``serviceLineId`` and ``SERVICELINEID`` are the same field.
"""

import re
from typing import Any, Iterable, Mapping, Optional

ID_SUFFIX = "ID"

_RAW_ID_SUFFIX = "Id"
_LEADING_INT = re.compile(r"^\s*([+-]?[0-9]+)")


def canonical_key(key: str) -> str:
    # Only the exact "Id" spelling is rewritten; "ID" and "id" are left to upper()
    if key.endswith(_RAW_ID_SUFFIX):
        key = key[: -len(_RAW_ID_SUFFIX)] + ID_SUFFIX
    return key.upper()


def normalize_keys(raw: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of ``raw`` keyed by canonical field names.

    Values are passed through untouched. When two raw keys fold onto the same
    canonical name the later one wins, in the mapping's iteration order.
    """
    out: dict[str, Any] = {}
    for key, value in raw.items():
        out[canonical_key(str(key))] = value
    return out


def normalize_rows(rows: Iterable[Mapping[str, Any]]) -> list[dict[str, Any]]:
    return [normalize_keys(row) for row in rows]


def is_id_field(field: str) -> bool:
    return field.endswith(ID_SUFFIX)


def parse_int(value: Any) -> Optional[int]:
    """Lenient base-10 integer parse; ``None`` when nothing usable is there.

    ``"12"`` -> 12, ``" 7 "`` -> 7, ``"12abc"`` -> 12, ``3.9`` -> 3,
    ``"abc"`` / ``""`` / ``None`` -> None. Booleans are not identifiers.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            return None
        return int(value)
    match = _LEADING_INT.match(str(value))
    if not match:
        return None
    try:
        return int(match.group(1))
    except ValueError:
        # Digit runs past the interpreter's int conversion limit
        return None


def is_blank(value: Any) -> bool:
    """Absent, empty string, zero, False and NaN all count as "no value"."""
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, (int, float)):
        return value == 0 or value != value
    return False
