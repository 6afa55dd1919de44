import re
from datetime import date, datetime
from typing import Any, Mapping, Optional

from hrforms.forms.normalize import is_id_field, parse_int


USER_CODE_FIELD = "CUSERID"

# "C" followed by up to nine digits, whole string
_USER_CODE = re.compile(r"C[0-9]{0,9}")


def is_valid_user_code(value: Any) -> bool:
    text = "" if value is None else str(value)
    return text == "" or _USER_CODE.fullmatch(text) is not None


def coerce_value(field: str, raw: Any) -> Any:
    """Value stored for ``field``: an int (or None) for ``...ID`` fields, else a string."""
    if is_id_field(field):
        # None stands in for an unparsable id and is sent as null
        return parse_int(raw)
    return "" if raw is None else str(raw)


def apply_edit(buffer: Mapping[str, Any], field: str, raw: Any) -> dict[str, Any]:
    """Return a copy of ``buffer`` with ``field`` set from raw input.

    A user code that is neither empty nor ``C`` plus at most nine digits is
    dropped: the returned buffer equals the input.
    """
    if field == USER_CODE_FIELD:
        if not is_valid_user_code(raw):
            return dict(buffer)
        return {**buffer, field: "" if raw is None else str(raw)}
    return {**buffer, field: coerce_value(field, raw)}


def format_date(value: date) -> str:
    # yyyy-MM-dd, zero padded; a datetime keeps only its calendar date
    if isinstance(value, datetime):
        value = value.date()
    return value.isoformat()


def apply_date(buffer: Mapping[str, Any], field: str, value: Optional[date]) -> dict[str, Any]:
    updated = dict(buffer)
    if value is None:
        updated.pop(field, None)
    else:
        updated[field] = format_date(value)
    return updated
