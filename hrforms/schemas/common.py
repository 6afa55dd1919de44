from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel


FieldValue = Union[int, str, None]


class EmployeeStatus(int, Enum):
    active = 72
    inactive = 73
    new = 203


class FormState(str, Enum):
    idle = "idle"
    searching = "searching"
    found = "found"
    not_found = "not_found"
    error = "error"
    edit_open = "edit_open"
    submitting = "submitting"


class NotificationVariant(str, Enum):
    default = "default"
    destructive = "destructive"


class Notification(BaseModel):
    title: str
    description: str
    variant: NotificationVariant = NotificationVariant.default

    @classmethod
    def error(cls, description: str, title: str = "Error") -> "Notification":
        return cls(title=title, description=description, variant=NotificationVariant.destructive)


class FormResult(BaseModel):
    ok: bool
    notification: Optional[Notification] = None
