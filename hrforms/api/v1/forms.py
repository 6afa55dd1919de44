from fastapi import APIRouter, Depends, HTTPException, Path, status

from hrforms.clients.hr_api import HrApiClient, get_hr_api_client
from hrforms.core.security import get_current_user
from hrforms.forms.controller import RecordFormController
from hrforms.forms.errors import FormStateError, UnknownFieldError
from hrforms.forms.pages import PAGES, PageSchema, get_page
from hrforms.forms.sessions import FormSessionStore, get_form_sessions
from hrforms.schemas.employee_schema import EmployeeSearchIn, FieldEditIn
from hrforms.schemas.form_schema import FormActionOut, FormViewOut, PageOut

router = APIRouter(prefix="/forms", tags=["forms"])


def _page_or_404(page: str) -> PageSchema:
    schema = get_page(page)
    if schema is None:
        raise HTTPException(status_code=404, detail="Form page not found")
    return schema


def _session_or_404(page: str, sessions: FormSessionStore, current_user: dict) -> RecordFormController:
    schema = _page_or_404(page)
    controller = sessions.get(current_user["id"], schema.name)
    if controller is None:
        raise HTTPException(status_code=404, detail="Form session not open")
    return controller


def _page_out(schema: PageSchema) -> dict:
    return {
        "name": schema.name,
        "title": schema.title,
        "required_status": int(schema.required_status),
        "search_fields": list(schema.search_fields),
        "display_fields": list(schema.display_fields),
        "edit_fields": list(schema.edit_fields),
        "date_fields": sorted(schema.date_fields),
        "lookup_fields": dict(schema.lookup_fields),
        "inline_edit": schema.inline_edit,
    }


def _action(controller: RecordFormController, ok: bool, accepted: bool | None = None) -> dict:
    return {"ok": ok, "accepted": accepted, "view": controller.snapshot()}


@router.get("", response_model=list[PageOut])
def list_pages(current_user=Depends(get_current_user)):
    return [_page_out(schema) for schema in PAGES.values()]


@router.post("/{page}", response_model=FormActionOut)
async def mount_form(
    page: str = Path(...),
    sessions: FormSessionStore = Depends(get_form_sessions),
    client: HrApiClient = Depends(get_hr_api_client),
    current_user=Depends(get_current_user),
):
    schema = _page_or_404(page)
    controller = sessions.open(current_user["id"], schema, client)
    result = await controller.mount()
    return _action(controller, result.ok)


@router.get("/{page}", response_model=FormViewOut)
def get_form(
    page: str = Path(...),
    sessions: FormSessionStore = Depends(get_form_sessions),
    current_user=Depends(get_current_user),
):
    return _session_or_404(page, sessions, current_user).snapshot()


@router.delete("/{page}")
def close_form(
    page: str = Path(...),
    sessions: FormSessionStore = Depends(get_form_sessions),
    current_user=Depends(get_current_user),
):
    schema = _page_or_404(page)
    closed = sessions.close(current_user["id"], schema.name)
    return {"status": "closed" if closed else "not_open", "page": schema.name}


@router.post("/{page}/search", response_model=FormActionOut)
async def search_employee(
    payload: EmployeeSearchIn,
    page: str = Path(...),
    sessions: FormSessionStore = Depends(get_form_sessions),
    current_user=Depends(get_current_user),
):
    controller = _session_or_404(page, sessions, current_user)
    result = await controller.search(**payload.model_dump())
    return _action(controller, result.ok)


@router.post("/{page}/clear", response_model=FormActionOut)
def clear_form(
    page: str = Path(...),
    sessions: FormSessionStore = Depends(get_form_sessions),
    current_user=Depends(get_current_user),
):
    controller = _session_or_404(page, sessions, current_user)
    controller.clear()
    return _action(controller, True)


@router.post("/{page}/edit", response_model=FormActionOut)
def open_edit(
    page: str = Path(...),
    sessions: FormSessionStore = Depends(get_form_sessions),
    current_user=Depends(get_current_user),
):
    controller = _session_or_404(page, sessions, current_user)
    opened = controller.open_edit()
    return _action(controller, opened)


@router.patch("/{page}/edit", response_model=FormActionOut)
def edit_field(
    payload: FieldEditIn,
    page: str = Path(...),
    sessions: FormSessionStore = Depends(get_form_sessions),
    current_user=Depends(get_current_user),
):
    controller = _session_or_404(page, sessions, current_user)
    try:
        if payload.is_date:
            controller.edit_date(payload.field, payload.date)
            accepted = True
        else:
            accepted = controller.edit_field(payload.field, payload.value)
    except UnknownFieldError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    except FormStateError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return _action(controller, True, accepted)


@router.post("/{page}/edit/save", response_model=FormActionOut)
def save_edit(
    page: str = Path(...),
    sessions: FormSessionStore = Depends(get_form_sessions),
    current_user=Depends(get_current_user),
):
    controller = _session_or_404(page, sessions, current_user)
    try:
        result = controller.save_local()
    except FormStateError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return _action(controller, result.ok)


@router.delete("/{page}/edit", response_model=FormActionOut)
def cancel_edit(
    page: str = Path(...),
    sessions: FormSessionStore = Depends(get_form_sessions),
    current_user=Depends(get_current_user),
):
    controller = _session_or_404(page, sessions, current_user)
    controller.cancel_edit()
    return _action(controller, True)


@router.post("/{page}/submit", response_model=FormActionOut)
async def submit_form(
    page: str = Path(...),
    sessions: FormSessionStore = Depends(get_form_sessions),
    current_user=Depends(get_current_user),
):
    controller = _session_or_404(page, sessions, current_user)
    try:
        # Entered_By comes from the authenticated user, never from the request body
        result = await controller.submit(entered_by=current_user["user_code"])
    except FormStateError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return _action(controller, result.ok)
