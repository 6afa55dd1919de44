"""Async client for the remote HR API.

Every call raises :class:`HrApiError` on transport failure and
:class:`HrApiStatusError` on a non-2xx response, whatever the body says.
Callers decide how a failure is surfaced.
"""

import logging
import ssl
from typing import Any, Optional
from urllib.parse import quote

import certifi
import httpx
from pydantic import ValidationError

from hrforms.core.config import settings
from hrforms.schemas.employee_schema import EmployeeVerification


logger = logging.getLogger("uvicorn.error")

LOOKUP_VALUES_PATH = "/fetch-lookup-values-no-input"
EMPLOYEE_VERIFY_PATH = "/employee-verify/{identifier}"


class HrApiError(Exception):
    """Network error or unusable response from the HR API."""


class HrApiStatusError(HrApiError):
    def __init__(self, status_code: int, path: str) -> None:
        super().__init__(f"HTTP error! Status: {status_code} ({path})")
        self.status_code = status_code
        self.path = path


class HrApiClient:
    def __init__(self, http: httpx.AsyncClient) -> None:
        self._http = http

    async def _request(self, method: str, path: str, json: Any = None) -> Any:
        try:
            resp = await self._http.request(method, path, json=json)
        except httpx.HTTPError as exc:
            logger.warning("hr_api_transport_error method=%s path=%s error=%s", method, path, exc)
            raise HrApiError(f"{method} {path} failed: {exc}") from exc
        if not resp.is_success:
            logger.warning("hr_api_status_error method=%s path=%s status=%s", method, path, resp.status_code)
            raise HrApiStatusError(resp.status_code, path)
        try:
            return resp.json()
        except ValueError as exc:
            raise HrApiError(f"{method} {path} returned invalid JSON") from exc

    async def get(self, path: str) -> Any:
        return await self._request("GET", path)

    async def post(self, path: str, payload: dict) -> Any:
        return await self._request("POST", path, json=payload)

    async def fetch_lookup_values(self) -> dict:
        data = await self.get(LOOKUP_VALUES_PATH)
        if not isinstance(data, dict):
            raise HrApiError("lookup values response is not an object")
        return data

    async def verify_employee(self, identifier: str) -> Optional[int]:
        data = await self.get(EMPLOYEE_VERIFY_PATH.format(identifier=_quote(identifier)))
        try:
            return EmployeeVerification.model_validate(data).employee_status_id
        except ValidationError as exc:
            raise HrApiError("employee verification response is malformed") from exc

    async def fetch_rows(self, path_template: str, identifier: str) -> list[dict]:
        data = await self.get(path_template.format(identifier=_quote(identifier)))
        if not isinstance(data, list):
            raise HrApiError(f"{path_template} response is not a list")
        return [row for row in data if isinstance(row, dict)]


def _quote(identifier: str) -> str:
    return quote(identifier.strip(), safe="")


_http_client: Optional[httpx.AsyncClient] = None


def get_http_client() -> httpx.AsyncClient:
    global _http_client
    if _http_client is None:
        # Use certifi CA bundle to avoid SSL verify errors in slim containers
        context = ssl.create_default_context(cafile=certifi.where())
        _http_client = httpx.AsyncClient(
            base_url=settings.HR_API_BASE_URL,
            timeout=settings.HR_API_TIMEOUT,
            headers={"Accept": "application/json"},
            verify=context,
        )
    return _http_client


def get_hr_api_client() -> HrApiClient:
    return HrApiClient(get_http_client())


async def close_http_client() -> None:
    global _http_client
    if _http_client is not None:
        await _http_client.aclose()
        _http_client = None
