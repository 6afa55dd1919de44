"""
Shared fixtures: an in-memory stand-in for the remote HR API.

The fake is served through ``httpx.MockTransport`` so the real
``HrApiClient`` request/response handling is exercised end to end.
"""

import asyncio
import copy
import json

import httpx
import pytest

from hrforms.clients.hr_api import HrApiClient


LOOKUPS = {
    "6": [{"LookUpValueID": 40, "LookUpValueName": "TCS"}],
    "7": [{"LookUpValueID": 3, "LookUpValueName": "APAC"}, {"LookUpValueID": 4, "LookUpValueName": "EMEA"}],
    "8": [{"LookUpValueID": 1, "LookUpValueName": "Chennai"}, {"LookUpValueID": 2, "LookUpValueName": "Pune"}],
    "11": [{"LookUpValueID": 1, "LookUpValueName": "Yes"}, {"LookUpValueID": 2, "LookUpValueName": "No"}],
    "13": [{"LookUpValueID": 5, "LookUpValueName": "Referral"}],
    "14": [{"LookUpValueID": 9, "LookUpValueName": "Project End"}],
    "15": [{"LookUpValueID": 10, "LookUpValueName": "Released"}],
    "16": [{"LookUpValueID": 1, "LookUpValueName": "Female"}, {"LookUpValueID": 2, "LookUpValueName": "Male"}],
    "17": [{"LookUpValueID": 20, "LookUpValueName": "Retail"}, {"LookUpValueID": 21, "LookUpValueName": "Banking"}],
    "18": [{"LookUpValueID": 30, "LookUpValueName": "Core"}],
}

ROLL_OFF_ROW = {
    "employeeNo": "E100",
    "employeeName": "Asha Rao",
    "cUserId": "C100",
    "rollOff": "1",
    "rollOffDate": "2024-05-31",
    "rollOffIntimationMail": "lead@example.com",
    "employeeSourceId": 5,
    "sl_no": "",
    "serviceLineId": 3,
    "baseLocationId": 1,
    "rollOffReasonId": 9,
    "rollOffRemarksId": 10,
    "rollOffDocPath": "",
}

ROLL_ON_ROW = {
    "EmployeeNo": "E200",
    "EmployeeName": "Ravi Kumar",
    "GenderId": 2,
    "ServiceLineId": 4,
    "BaseLocationId": 2,
    "OrganizationId": 21,
    "ProductionLineId": 30,
    "EmployerId": 40,
    "EmployeeSourceId": 5,
    "CUserId": "C200",
    "Sl_No": "17",
}

TEAM_MOVEMENT_ROW = {
    "employeeNo": "E100",
    "cUserId": "C100",
    "employeeName": "Asha Rao",
    "current_serviceLineId": 3,
    "current_baseLocationId": 1,
    "current_organizationId": 20,
    "from_date": "2023-01-01",
}

TEAM_MOVEMENT_HISTORY = [
    {
        "employeeNo": "E100",
        "cUserId": "C100",
        "employeeName": "Asha Rao",
        "from_date": "2022-01-01",
        "from_serviceLineId": 4,
        "to_serviceLineId": 3,
        "from_baseLocationId": 2,
        "to_baseLocationId": 1,
        "from_organizationId": 21,
        "to_organizationId": 20,
        "bill_start_date": "2023-01-02",
    }
]


class FakeHrApi:
    def __init__(self) -> None:
        self.lookups = copy.deepcopy(LOOKUPS)
        self.statuses = {"E100": 72, "C100": 72, "E200": 203, "E300": 73}
        self.rows = {
            "RollOff": {"E100": [dict(ROLL_OFF_ROW)], "C100": [dict(ROLL_OFF_ROW)], "E300": [dict(ROLL_OFF_ROW, employeeNo="E300")]},
            "RollOn": {"E200": [dict(ROLL_ON_ROW)], "E100": [dict(ROLL_ON_ROW, EmployeeNo="E100")]},
            "TeamMovement": {"E100": [dict(TEAM_MOVEMENT_ROW)], "C100": [dict(TEAM_MOVEMENT_ROW)]},
            "TeamMovementHistory": {"E100": copy.deepcopy(TEAM_MOVEMENT_HISTORY)},
        }
        self.post_response: dict = {"message": "Inserted"}
        self.requests: list[tuple[str, str]] = []
        self.posted: list[tuple[str, dict]] = []
        # path prefix -> HTTP status to answer with
        self.fail: dict[str, int] = {}
        # path prefixes that raise a transport error
        self.unreachable: set[str] = set()
        # path prefix whose requests wait for ``release`` to be set
        self.hold: str | None = None
        self.holding = False
        self.release: asyncio.Event | None = None

    def _match(self, path: str, prefixes) -> str | None:
        for prefix in prefixes:
            if path.startswith(prefix):
                return prefix
        return None

    async def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        self.requests.append((request.method, path))
        if self.hold and path.startswith(self.hold):
            self.holding = True
            await self.release.wait()
        if self._match(path, self.unreachable):
            raise httpx.ConnectError("connection refused", request=request)
        failed = self._match(path, self.fail)
        if failed:
            return httpx.Response(self.fail[failed], json={"detail": "boom"})

        if request.method == "POST":
            self.posted.append((path, json.loads(request.content)))
            return httpx.Response(200, json=self.post_response)
        if path == "/fetch-lookup-values-no-input":
            return httpx.Response(200, json=self.lookups)
        resource, _, identifier = path.strip("/").partition("/")
        if resource == "employee-verify":
            return httpx.Response(200, json={"employee_status_id": self.statuses.get(identifier)})
        if resource in self.rows:
            return httpx.Response(200, json=self.rows[resource].get(identifier, []))
        return httpx.Response(404, json={"detail": "Not Found"})

    def calls(self, prefix: str) -> int:
        return sum(1 for _, path in self.requests if path.startswith(prefix))

    def client(self) -> HrApiClient:
        http = httpx.AsyncClient(base_url="http://hr-api.test", transport=httpx.MockTransport(self.handler))
        return HrApiClient(http)


@pytest.fixture
def hr_api() -> FakeHrApi:
    return FakeHrApi()
