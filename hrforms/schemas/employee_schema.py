from datetime import date as _date
from typing import Optional

from pydantic import BaseModel, model_validator

from .common import FieldValue


class EmployeeSearchIn(BaseModel):
    employee_no: Optional[str] = None
    user_code: Optional[str] = None


class FieldEditIn(BaseModel):
    field: str
    value: FieldValue = None
    date: Optional[_date] = None
    # True when the payload targets a date field; a null date clears it
    is_date: bool = False

    @model_validator(mode="after")
    def _date_implies_is_date(self):
        if self.date is not None:
            self.is_date = True
        return self


class EmployeeVerification(BaseModel):
    employee_status_id: Optional[int] = None
