from typing import Any, Mapping

from hrforms.forms.lookups import UNRESOLVED, LookupCache
from hrforms.forms.normalize import is_blank
from hrforms.forms.pages import PageSchema


def display_value(value: Any) -> str:
    if is_blank(value):
        return UNRESOLVED
    return str(value)


def render_row(
    fields: tuple[str, ...],
    lookup_fields: Mapping[str, int],
    row: Mapping[str, Any],
    lookups: LookupCache,
) -> dict[str, str]:
    out = {}
    for name in fields:
        category = lookup_fields.get(name)
        if category is not None:
            out[name] = lookups.resolve(category, row.get(name))
        else:
            out[name] = display_value(row.get(name))
    return out


def render_record(page: PageSchema, record: Mapping[str, Any], lookups: LookupCache) -> dict[str, str]:
    return render_row(page.display_fields, page.lookup_fields, record, lookups)


def render_history(page: PageSchema, rows: list[Mapping[str, Any]], lookups: LookupCache) -> list[dict[str, str]]:
    return [render_row(page.history_fields, page.history_lookup_fields, row, lookups) for row in rows]
