"""Declarative description of each employee lifecycle form.

A :class:`PageSchema` is everything that differs between the roll-on,
roll-off and team movement pages: where records come from, which status code
unlocks editing, which fields are lookups or dates, and how the outbound
payload is named. :class:`~hrforms.forms.controller.RecordFormController`
runs the same state machine for all of them.
"""

from dataclasses import dataclass, field
from typing import Mapping, Optional

from hrforms.forms.lookups import LookupCategory
from hrforms.schemas.common import EmployeeStatus


PRIMARY_FIELD = "EMPLOYEENO"

# Search inputs in precedence order; the first non-blank one is used
SEARCH_EMPLOYEE_NO = "employee_no"
SEARCH_USER_CODE = "user_code"

RECORD = "record"
BUFFER = "buffer"


@dataclass(frozen=True)
class PayloadField:
    name: str           # key expected by the HR API
    field: str          # canonical field it is read from
    source: str = RECORD


@dataclass(frozen=True)
class PageMessages:
    search_prompt: str
    not_found: str
    submit_success: str
    submit_failure: str
    saved: str = "Employee details updated. Click Submit to save to backend."
    required_fields: str = "Please fill all required fields."


@dataclass(frozen=True)
class PageSchema:
    name: str
    title: str
    record_path: str
    submit_path: str
    required_status: EmployeeStatus
    search_fields: tuple[str, ...]
    display_fields: tuple[str, ...]
    lookup_fields: Mapping[str, int]
    date_fields: frozenset[str]
    edit_fields: tuple[str, ...]
    payload: tuple[PayloadField, ...]
    messages: PageMessages
    # Fields that must be set in the edit buffer before submit
    required_buffer_fields: tuple[str, ...] = ()
    # Inline pages edit an always-open buffer that starts empty after each search
    inline_edit: bool = False
    refresh_after_submit: bool = False
    history_path: Optional[str] = None
    history_fields: tuple[str, ...] = ()
    history_lookup_fields: Mapping[str, int] = field(default_factory=dict)


ROLL_ON = PageSchema(
    name="roll-on",
    title="Project Roll On",
    record_path="/RollOn/{identifier}",
    submit_path="/insert_rollon_details",
    required_status=EmployeeStatus.new,
    search_fields=(SEARCH_EMPLOYEE_NO,),
    display_fields=(
        "EMPLOYEENO",
        "EMPLOYEENAME",
        "GENDERID",
        "ROLLONDATE",
        "EMPLOYEESOURCEID",
        "SL_NO",
        "ROLLONDOC_PATH",
        "ODCACCESSENABLEDDT",
        "NWACCESSENABLEDDT",
        "CUSERID",
        "TCSSMARTCARDNO",
        "ROLLOFF",
        "EMPLOYERID",
        "SERVICELINEID",
        "BASELOCATIONID",
        "ORGANIZATIONID",
        "PRODUCTIONLINEID",
    ),
    lookup_fields={
        "GENDERID": LookupCategory.GENDER,
        "EMPLOYEESOURCEID": LookupCategory.EMPLOYEE_SOURCE,
        "EMPLOYERID": LookupCategory.EMPLOYER,
        "SERVICELINEID": LookupCategory.SERVICE_LINE,
        "BASELOCATIONID": LookupCategory.BASE_LOCATION,
        "ORGANIZATIONID": LookupCategory.ORGANIZATION,
        "PRODUCTIONLINEID": LookupCategory.PRODUCTION_LINE,
    },
    date_fields=frozenset({"ROLLONDATE", "ODCACCESSENABLEDDT", "NWACCESSENABLEDDT"}),
    edit_fields=(
        "EMPLOYEENAME",
        "GENDERID",
        "ROLLONDATE",
        "EMPLOYEESOURCEID",
        "CUSERID",
        "TCSSMARTCARDNO",
        "SERVICELINEID",
        "BASELOCATIONID",
        "ORGANIZATIONID",
        "PRODUCTIONLINEID",
        "EMPLOYERID",
        "SL_NO",
        "ROLLONDOC_PATH",
        "ODCACCESSENABLEDDT",
        "NWACCESSENABLEDDT",
    ),
    payload=(
        PayloadField("EmployeeNo", "EMPLOYEENO"),
        PayloadField("CUserID", "CUSERID"),
        PayloadField("EmployeeName", "EMPLOYEENAME"),
        PayloadField("GenderID", "GENDERID"),
        PayloadField("Sl_No", "SL_NO"),
        PayloadField("RollOnDocPath", "ROLLONDOC_PATH"),
        PayloadField("TcsCardNo", "TCSSMARTCARDNO"),
        PayloadField("ServiceLineID", "SERVICELINEID"),
        PayloadField("BaseLocationID", "BASELOCATIONID"),
        PayloadField("EmployeeSourceID", "EMPLOYEESOURCEID"),
        PayloadField("NWAccessEnabledDt", "NWACCESSENABLEDDT"),
        PayloadField("ODCAccessEnabledDt", "ODCACCESSENABLEDDT"),
        PayloadField("OrganizationID", "ORGANIZATIONID"),
        PayloadField("ProductionLineID", "PRODUCTIONLINEID"),
        PayloadField("EmployerID", "EMPLOYERID"),
        PayloadField("RollOnDate", "ROLLONDATE"),
    ),
    messages=PageMessages(
        search_prompt="Please enter an Employee No.",
        not_found="No employee data found for this Employee No.",
        submit_success="Employee roll-on details submitted successfully.",
        submit_failure="Failed to submit roll-on details.",
    ),
)


ROLL_OFF = PageSchema(
    name="roll-off",
    title="Project Roll Off",
    record_path="/RollOff/{identifier}",
    submit_path="/insert_rolloff_details",
    required_status=EmployeeStatus.active,
    search_fields=(SEARCH_EMPLOYEE_NO, SEARCH_USER_CODE),
    display_fields=(
        "EMPLOYEENO",
        "EMPLOYEENAME",
        "CUSERID",
        "ROLLOFF",
        "ROLLOFFDATE",
        "ROLLOFFINTIMATIONMAIL",
        "NWACCESSDISABLED",
        "ODCACCESSDISABLED",
        "EMPLOYEESOURCEID",
        "SL_NO",
        "SERVICELINEID",
        "BASELOCATIONID",
        "ROLLOFFNOTIFICATIONMAIL",
        "ROLLOFFREASONID",
        "ROLLOFFREMARKSID",
        "ROLLOFFDOCPATH",
    ),
    lookup_fields={
        # ROLLOFF is a yes/no lookup even though its name has no ID suffix
        "ROLLOFF": LookupCategory.ROLLOFF,
        "EMPLOYEESOURCEID": LookupCategory.EMPLOYEE_SOURCE,
        "SERVICELINEID": LookupCategory.SERVICE_LINE,
        "BASELOCATIONID": LookupCategory.BASE_LOCATION,
        "ROLLOFFREASONID": LookupCategory.ROLLOFF_REASON,
        "ROLLOFFREMARKSID": LookupCategory.ROLLOFF_REMARKS,
    },
    date_fields=frozenset({"ROLLOFFDATE", "NWACCESSDISABLED", "ODCACCESSDISABLED"}),
    edit_fields=(
        "EMPLOYEENAME",
        "ROLLOFF",
        "ROLLOFFDATE",
        "ROLLOFFINTIMATIONMAIL",
        "NWACCESSDISABLED",
        "ODCACCESSDISABLED",
        "EMPLOYEESOURCEID",
        "SL_NO",
        "SERVICELINEID",
        "BASELOCATIONID",
        "ROLLOFFNOTIFICATIONMAIL",
        "ROLLOFFREASONID",
        "ROLLOFFREMARKSID",
        "ROLLOFFDOCPATH",
    ),
    payload=(
        PayloadField("EmployeeNo", "EMPLOYEENO"),
        PayloadField("CUserID", "CUSERID"),
        PayloadField("EmployeeName", "EMPLOYEENAME"),
        PayloadField("RollOff", "ROLLOFF"),
        PayloadField("RollOffDate", "ROLLOFFDATE"),
        PayloadField("RollOffIntimationMail", "ROLLOFFINTIMATIONMAIL"),
        PayloadField("NWAccessDisabled", "NWACCESSDISABLED"),
        PayloadField("ODCAccessDisabled", "ODCACCESSDISABLED"),
        PayloadField("EmployeeSourceID", "EMPLOYEESOURCEID"),
        PayloadField("Sl_No", "SL_NO"),
        PayloadField("ServiceLineID", "SERVICELINEID"),
        PayloadField("BaseLocationID", "BASELOCATIONID"),
        PayloadField("RollOffNotificationMail", "ROLLOFFNOTIFICATIONMAIL"),
        PayloadField("RollOffReasonID", "ROLLOFFREASONID"),
        PayloadField("RollOffRemarksID", "ROLLOFFREMARKSID"),
        PayloadField("RollOffDocPath", "ROLLOFFDOCPATH"),
    ),
    messages=PageMessages(
        search_prompt="Please enter either Employee ID or CUser ID.",
        not_found="No employee data found for this ID.",
        saved="Employee roll-off details updated. Click Submit to save to backend.",
        submit_success="Employee roll-off details submitted successfully.",
        submit_failure="Failed to submit roll-off details.",
    ),
)


TEAM_MOVEMENT = PageSchema(
    name="team-movement",
    title="Team Movement",
    record_path="/TeamMovement/{identifier}",
    submit_path="/insert_team_movement",
    required_status=EmployeeStatus.active,
    search_fields=(SEARCH_EMPLOYEE_NO, SEARCH_USER_CODE),
    display_fields=(
        "EMPLOYEENO",
        "CUSERID",
        "EMPLOYEENAME",
        "CURRENT_SERVICELINEID",
        "CURRENT_BASELOCATIONID",
        "CURRENT_ORGANIZATIONID",
        "FROM_DATE",
    ),
    lookup_fields={
        "CURRENT_SERVICELINEID": LookupCategory.SERVICE_LINE,
        "CURRENT_BASELOCATIONID": LookupCategory.BASE_LOCATION,
        "CURRENT_ORGANIZATIONID": LookupCategory.ORGANIZATION,
        "TO_SERVICELINEID": LookupCategory.SERVICE_LINE,
        "TO_BASELOCATIONID": LookupCategory.BASE_LOCATION,
        "TO_ORGANIZATIONID": LookupCategory.ORGANIZATION,
    },
    date_fields=frozenset({"BILL_START_DATE"}),
    edit_fields=("TO_SERVICELINEID", "TO_BASELOCATIONID", "TO_ORGANIZATIONID", "BILL_START_DATE"),
    payload=(
        PayloadField("EmployeeNo", "EMPLOYEENO"),
        PayloadField("CUserID", "CUSERID"),
        PayloadField("EmployeeName", "EMPLOYEENAME"),
        PayloadField("FromServiceLineID", "CURRENT_SERVICELINEID"),
        PayloadField("ToServiceLineID", "TO_SERVICELINEID", BUFFER),
        PayloadField("FromBaseLocationID", "CURRENT_BASELOCATIONID"),
        PayloadField("ToBaseLocationID", "TO_BASELOCATIONID", BUFFER),
        PayloadField("FromOrganizationID", "CURRENT_ORGANIZATIONID"),
        PayloadField("ToOrganizationID", "TO_ORGANIZATIONID", BUFFER),
        PayloadField("FromDate", "FROM_DATE"),
        PayloadField("BillStartDate", "BILL_START_DATE", BUFFER),
    ),
    messages=PageMessages(
        search_prompt="Please enter Employee No or CUser ID.",
        not_found="No team movement data found for this employee.",
        submit_success="Team movement details submitted successfully.",
        submit_failure="Failed to submit team movement details.",
        required_fields="Please fill all required fields in 'To Service Line' section.",
    ),
    required_buffer_fields=("TO_SERVICELINEID", "TO_BASELOCATIONID", "TO_ORGANIZATIONID", "BILL_START_DATE"),
    inline_edit=True,
    refresh_after_submit=True,
    history_path="/TeamMovementHistory/{identifier}",
    history_fields=(
        "EMPLOYEENO",
        "CUSERID",
        "EMPLOYEENAME",
        "FROM_DATE",
        "FROM_SERVICELINEID",
        "TO_SERVICELINEID",
        "FROM_BASELOCATIONID",
        "TO_BASELOCATIONID",
        "FROM_ORGANIZATIONID",
        "TO_ORGANIZATIONID",
        "BILL_START_DATE",
    ),
    history_lookup_fields={
        "FROM_SERVICELINEID": LookupCategory.SERVICE_LINE,
        "TO_SERVICELINEID": LookupCategory.SERVICE_LINE,
        "FROM_BASELOCATIONID": LookupCategory.BASE_LOCATION,
        "TO_BASELOCATIONID": LookupCategory.BASE_LOCATION,
        "FROM_ORGANIZATIONID": LookupCategory.ORGANIZATION,
        "TO_ORGANIZATIONID": LookupCategory.ORGANIZATION,
    },
)


PAGES: dict[str, PageSchema] = {page.name: page for page in (ROLL_ON, ROLL_OFF, TEAM_MOVEMENT)}


def get_page(name: str) -> Optional[PageSchema]:
    return PAGES.get(name)
