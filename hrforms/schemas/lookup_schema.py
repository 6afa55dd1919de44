from pydantic import BaseModel, Field, ConfigDict


class LookupValue(BaseModel):
    value_id: int = Field(alias="LookUpValueID")
    label: str = Field(alias="LookUpValueName")

    # Allow population by field name and alias
    model_config = ConfigDict(populate_by_name=True, frozen=True)


class LookupFieldOptions(BaseModel):
    field: str       # canonical field, e.g. "SERVICELINEID"
    category: int    # lookup category, e.g. 7
    options: list[LookupValue]


class PageLookupsOut(BaseModel):
    page: str
    loaded: bool
    fields: list[LookupFieldOptions]
