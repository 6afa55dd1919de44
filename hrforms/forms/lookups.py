import logging
from types import MappingProxyType
from typing import Any, Mapping

from hrforms.clients.hr_api import HrApiClient
from hrforms.forms.normalize import is_blank, parse_int
from hrforms.schemas.lookup_schema import LookupValue


UNRESOLVED = "TBD"

LookupTable = dict[int, list[LookupValue]]


class LookupCategory:
    EMPLOYER = 6
    SERVICE_LINE = 7
    BASE_LOCATION = 8
    ROLLOFF = 11
    EMPLOYEE_SOURCE = 13
    ROLLOFF_REASON = 14
    ROLLOFF_REMARKS = 15
    GENDER = 16
    ORGANIZATION = 17
    PRODUCTION_LINE = 18


def parse_lookup_table(raw: Mapping[Any, Any]) -> LookupTable:
    """Build a table from the ``/fetch-lookup-values-no-input`` payload.

    JSON object keys arrive as strings; categories that are not integers and
    entries that do not validate are dropped. Server ordering is kept.
    """
    table: LookupTable = {}
    for key, entries in raw.items():
        category = parse_int(key)
        if category is None or not isinstance(entries, list):
            continue
        values: list[LookupValue] = []
        for entry in entries:
            if not isinstance(entry, Mapping):
                continue
            value_id = parse_int(entry.get("LookUpValueID"))
            if value_id is None:
                continue
            label = entry.get("LookUpValueName")
            values.append(LookupValue(value_id=value_id, label="" if label is None else str(label)))
        table[category] = values
    return table


def resolve_lookup(table: Mapping[int, list[LookupValue]], category_id: int, value_id: Any) -> str:
    # Zero, empty and unparsable ids all mean "not chosen yet"
    if is_blank(value_id):
        return UNRESOLVED
    parsed = parse_int(value_id)
    if parsed is None:
        return UNRESOLVED
    for entry in table.get(category_id) or ():
        if entry.value_id == parsed:
            return entry.label or UNRESOLVED
    return UNRESOLVED


class LookupCache:
    """Lookup table owned by one page session, fetched at most once."""

    def __init__(self) -> None:
        self._table: LookupTable = {}
        self._loaded = False

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def table(self) -> Mapping[int, list[LookupValue]]:
        return MappingProxyType(self._table)

    async def load_once(self, client: HrApiClient) -> LookupTable:
        if self._loaded:
            return self._table
        # A failed fetch propagates and leaves the cache empty so the next mount retries
        raw = await client.fetch_lookup_values()
        self._table = parse_lookup_table(raw)
        self._loaded = True
        logging.getLogger("uvicorn.error").info("lookup_table_loaded categories=%s", len(self._table))
        return self._table

    def options(self, category_id: int) -> list[LookupValue]:
        return list(self._table.get(category_id, []))

    def resolve(self, category_id: int, value_id: Any) -> str:
        return resolve_lookup(self._table, category_id, value_id)

