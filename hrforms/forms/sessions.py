from typing import Optional

from hrforms.clients.hr_api import HrApiClient
from hrforms.forms.controller import RecordFormController
from hrforms.forms.pages import PageSchema


class FormSessionStore:
    """In-process form sessions, one controller per (user, page)."""

    def __init__(self) -> None:
        self._sessions: dict[tuple[str, str], RecordFormController] = {}

    def get(self, user_id: str, page_name: str) -> Optional[RecordFormController]:
        return self._sessions.get((user_id, page_name))

    def open(self, user_id: str, page: PageSchema, client: HrApiClient) -> RecordFormController:
        key = (user_id, page.name)
        controller = self._sessions.get(key)
        if controller is None or controller.closed:
            # Each page session owns its lookup cache
            controller = RecordFormController(page, client)
            self._sessions[key] = controller
        return controller

    def close(self, user_id: str, page_name: str) -> bool:
        controller = self._sessions.pop((user_id, page_name), None)
        if controller is None:
            return False
        controller.close()
        return True

    def clear(self) -> None:
        for controller in self._sessions.values():
            controller.close()
        self._sessions.clear()


form_sessions = FormSessionStore()


def get_form_sessions() -> FormSessionStore:
    return form_sessions
