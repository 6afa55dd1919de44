"""Generic search / edit / submit workflow for one employee form page.

One :class:`RecordFormController` is created per user and page. It owns the
page's lookup cache, the record on display, the edit buffer and the status
gate returned by employee verification. Remote work goes through
:class:`~hrforms.clients.hr_api.HrApiClient` and its failures come back as
notifications so callers can always render the view.

Each search and submit takes a sequence number. A response is only applied
while its number is still the latest one issued and the controller has not
been closed, so ``clear()`` and ``close()`` abandon in-flight work.
"""

import logging
from datetime import date
from typing import Any, Optional

from hrforms.clients.hr_api import HrApiClient, HrApiError, HrApiStatusError
from hrforms.forms.coercion import USER_CODE_FIELD, apply_date, apply_edit, is_valid_user_code
from hrforms.forms.display import render_history, render_record
from hrforms.forms.errors import FormStateError, UnknownFieldError
from hrforms.forms.lookups import LookupCache
from hrforms.forms.normalize import normalize_keys, normalize_rows
from hrforms.forms.pages import PRIMARY_FIELD, PageSchema
from hrforms.forms.payload import build_payload, missing_required
from hrforms.schemas.common import FormResult, FormState, Notification


logger = logging.getLogger("uvicorn.error")

LOOKUP_LOAD_FAILED = "Failed to fetch lookup data from backend."
FETCH_FAILED = "Failed to fetch employee data."
PRIMARY_REQUIRED = "Employee number is required."
BUSY = "Another request for this form is still running."


class RecordFormController:
    def __init__(self, page: PageSchema, client: HrApiClient, lookups: Optional[LookupCache] = None) -> None:
        self.page = page
        self.client = client
        self.lookups = lookups if lookups is not None else LookupCache()
        self.state = FormState.idle
        self.status: Optional[int] = None
        self.identifier: Optional[str] = None
        self.record: Optional[dict[str, Any]] = None
        self.buffer: Optional[dict[str, Any]] = None
        self.history: list[dict[str, Any]] = []
        self.notification: Optional[Notification] = None
        self._seq = 0
        self._busy = False
        self._closed = False

    @property
    def can_edit(self) -> bool:
        return self.record is not None and self.status == self.page.required_status

    @property
    def busy(self) -> bool:
        return self._busy

    @property
    def closed(self) -> bool:
        return self._closed

    def _notify(self, notification: Optional[Notification], ok: bool) -> FormResult:
        self.notification = notification
        return FormResult(ok=ok, notification=notification)

    def _begin(self) -> int:
        self._seq += 1
        self._busy = True
        return self._seq

    def _finish(self, seq: int) -> None:
        if seq == self._seq:
            self._busy = False

    def _is_current(self, seq: int) -> bool:
        if seq == self._seq and not self._closed:
            return True
        logger.warning("stale_response_discarded page=%s seq=%s latest=%s", self.page.name, seq, self._seq)
        return False

    def _busy_result(self) -> FormResult:
        # The triggering control is disabled while a call is in flight; do not touch state
        return FormResult(ok=False, notification=Notification.error(BUSY))

    async def mount(self) -> FormResult:
        if self._closed:
            raise FormStateError("Form session is closed")
        try:
            await self.lookups.load_once(self.client)
        except HrApiError as exc:
            logger.warning("lookup_load_failed page=%s error=%s", self.page.name, exc)
            return self._notify(Notification.error(LOOKUP_LOAD_FAILED), ok=False)
        return FormResult(ok=True)

    def pick_identifier(self, **queries: Optional[str]) -> Optional[str]:
        for name in self.page.search_fields:
            value = (queries.get(name) or "").strip()
            if value:
                return value
        return None

    async def search(self, **queries: Optional[str]) -> FormResult:
        identifier = self.pick_identifier(**queries)
        if not identifier:
            return self._notify(Notification.error(self.page.messages.search_prompt), ok=False)
        if self._busy:
            return self._busy_result()
        return await self._search(identifier)

    async def _search(self, identifier: str) -> FormResult:
        seq = self._begin()
        self.state = FormState.searching
        try:
            status = await self.client.verify_employee(identifier)
            rows = await self.client.fetch_rows(self.page.record_path, identifier)
            history = await self._fetch_history(identifier)
        except HrApiError as exc:
            if not self._is_current(seq):
                return FormResult(ok=False)
            logger.warning("search_failed page=%s identifier=%s error=%s", self.page.name, identifier, exc)
            self.record = None
            self.buffer = None
            self.status = None
            self.history = []
            self.state = FormState.error
            return self._notify(Notification.error(FETCH_FAILED), ok=False)
        finally:
            self._finish(seq)

        if not self._is_current(seq):
            return FormResult(ok=False)

        self.identifier = identifier
        self.status = status
        self.history = history
        if not rows:
            self.record = None
            self.buffer = None
            self.state = FormState.not_found
            return self._notify(Notification.error(self.page.messages.not_found, title="No Data"), ok=True)

        # At most one row per identifier is expected; take the first
        if len(rows) > 1:
            logger.info("search_multiple_rows page=%s identifier=%s rows=%s", self.page.name, identifier, len(rows))
        self.record = normalize_keys(rows[0])
        self.buffer = {} if self.page.inline_edit else None
        self.state = FormState.found
        return self._notify(None, ok=True)

    async def _fetch_history(self, identifier: str) -> list[dict[str, Any]]:
        if not self.page.history_path:
            return []
        try:
            rows = await self.client.fetch_rows(self.page.history_path, identifier)
        except HrApiStatusError:
            return []
        return normalize_rows(rows)

    def open_edit(self) -> bool:
        """Start editing the displayed record; a no-op while the status gate is closed."""
        if not self.can_edit:
            return False
        if self.page.inline_edit or self.state == FormState.edit_open:
            return self.buffer is not None
        self.buffer = dict(self.record)
        self.state = FormState.edit_open
        return True

    def _require_buffer(self) -> dict[str, Any]:
        if self.buffer is None:
            raise FormStateError("No edit in progress")
        return self.buffer

    def edit_field(self, field: str, raw: Any) -> bool:
        """Apply raw input to ``field``; False when the input was rejected."""
        buffer = self._require_buffer()
        if field not in self.page.edit_fields or field in self.page.date_fields:
            raise UnknownFieldError(self.page.name, field)
        self.buffer = apply_edit(buffer, field, raw)
        return field != USER_CODE_FIELD or is_valid_user_code(raw)

    def edit_date(self, field: str, value: Optional[date]) -> None:
        buffer = self._require_buffer()
        if field not in self.page.date_fields or field not in self.page.edit_fields:
            raise UnknownFieldError(self.page.name, field)
        self.buffer = apply_date(buffer, field, value)

    def save_local(self) -> FormResult:
        if self.page.inline_edit or self.state != FormState.edit_open:
            raise FormStateError("No edit in progress")
        self.record = dict(self._require_buffer())
        self.buffer = None
        self.state = FormState.found
        return self._notify(Notification(title="Changes Saved", description=self.page.messages.saved), ok=True)

    def cancel_edit(self) -> None:
        if self.page.inline_edit:
            if self.buffer is not None:
                self.buffer = {}
            return
        if self.state == FormState.edit_open:
            self.buffer = None
            self.state = FormState.found

    async def submit(self, entered_by: str) -> FormResult:
        if self._busy:
            return self._busy_result()
        if self.state == FormState.edit_open:
            raise FormStateError("Save or cancel the open edit before submitting")
        if not self.can_edit:
            raise FormStateError("Submit is not available for this employee")
        record = self.record or {}
        buffer = self.buffer or {}
        missing = missing_required(self.page, record, buffer)
        if PRIMARY_FIELD in missing:
            return self._notify(Notification.error(PRIMARY_REQUIRED), ok=False)
        if missing:
            return self._notify(Notification.error(self.page.messages.required_fields), ok=False)

        body = build_payload(self.page, record, buffer, entered_by)
        seq = self._begin()
        self.state = FormState.submitting
        try:
            result = await self.client.post(self.page.submit_path, body)
        except HrApiError as exc:
            if not self._is_current(seq):
                return FormResult(ok=False)
            logger.warning("submit_failed page=%s employee=%s error=%s", self.page.name, body.get("EmployeeNo"), exc)
            self.state = FormState.found
            return self._notify(Notification.error(self.page.messages.submit_failure), ok=False)
        finally:
            self._finish(seq)

        if not self._is_current(seq):
            return FormResult(ok=False)
        logger.info("submitted page=%s employee=%s entered_by=%s", self.page.name, body.get("EmployeeNo"), entered_by)
        self.state = FormState.found
        message = result.get("message") if isinstance(result, dict) else None
        success = Notification(title="Success", description=message or self.page.messages.submit_success)
        if self.page.refresh_after_submit and self.identifier:
            refreshed = await self._search(self.identifier)
            if refreshed.notification is not None:
                # The submit went through; the refresh problem is what the user needs to see
                return FormResult(ok=True, notification=refreshed.notification)
        return self._notify(success, ok=True)

    def clear(self) -> None:
        self._seq += 1
        self._busy = False
        self.state = FormState.idle
        self.status = None
        self.identifier = None
        self.record = None
        self.buffer = None
        self.history = []
        self.notification = None

    def close(self) -> None:
        self.clear()
        self._closed = True

    def snapshot(self) -> dict[str, Any]:
        return {
            "page": self.page.name,
            "state": self.state,
            "status": self.status,
            "identifier": self.identifier,
            "can_edit": self.can_edit,
            "busy": self._busy,
            "lookups_loaded": self.lookups.loaded,
            "record": self.record,
            "display": render_record(self.page, self.record, self.lookups) if self.record is not None else None,
            "buffer": self.buffer,
            "history": render_history(self.page, self.history, self.lookups),
            "notification": self.notification,
        }
