from typing import Any, Optional

from pydantic import BaseModel

from .common import FormState, Notification


class PageOut(BaseModel):
    name: str
    title: str
    required_status: int
    search_fields: list[str]
    display_fields: list[str]
    edit_fields: list[str]
    date_fields: list[str]
    lookup_fields: dict[str, int]
    inline_edit: bool


class FormViewOut(BaseModel):
    page: str
    state: FormState
    status: Optional[int] = None
    identifier: Optional[str] = None
    can_edit: bool
    busy: bool
    lookups_loaded: bool
    record: Optional[dict[str, Any]] = None
    display: Optional[dict[str, str]] = None
    buffer: Optional[dict[str, Any]] = None
    history: list[dict[str, str]] = []
    notification: Optional[Notification] = None


class FormActionOut(BaseModel):
    ok: bool
    # False when an edit was refused, e.g. a malformed user code
    accepted: Optional[bool] = None
    view: FormViewOut
