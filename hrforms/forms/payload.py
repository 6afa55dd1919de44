from typing import Any, Mapping, Optional

from hrforms.forms.normalize import is_blank
from hrforms.forms.pages import BUFFER, PRIMARY_FIELD, PageSchema


ENTERED_BY = "Entered_By"


def missing_required(page: PageSchema, record: Mapping[str, Any], buffer: Mapping[str, Any]) -> list[str]:
    missing = []
    if is_blank(record.get(PRIMARY_FIELD)):
        missing.append(PRIMARY_FIELD)
    for name in page.required_buffer_fields:
        if is_blank(buffer.get(name)):
            missing.append(name)
    return missing


def build_payload(
    page: PageSchema,
    record: Mapping[str, Any],
    buffer: Optional[Mapping[str, Any]],
    entered_by: str,
) -> dict[str, Any]:
    """Map canonical fields onto the HR API's insert body for ``page``."""
    buffer = buffer or {}
    body: dict[str, Any] = {}
    for item in page.payload:
        source = buffer if item.source == BUFFER else record
        value = source.get(item.field)
        body[item.name] = None if is_blank(value) else value
    body[ENTERED_BY] = entered_by
    return body
