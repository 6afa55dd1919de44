from fastapi import APIRouter, Depends, HTTPException

from hrforms.core.security import get_current_user
from hrforms.forms.pages import get_page
from hrforms.forms.sessions import FormSessionStore, get_form_sessions
from hrforms.schemas.lookup_schema import PageLookupsOut

router = APIRouter(prefix="/lookups", tags=["lookups"])


@router.get("/{page}", response_model=PageLookupsOut)
def get_page_lookups(
    page: str,
    sessions: FormSessionStore = Depends(get_form_sessions),
    current_user=Depends(get_current_user),
):
    """Selector options for every lookup-backed field of a mounted page, in server order."""
    schema = get_page(page)
    if schema is None:
        raise HTTPException(status_code=404, detail="Form page not found")
    controller = sessions.get(current_user["id"], schema.name)
    if controller is None:
        raise HTTPException(status_code=404, detail="Form session not open")
    cache = controller.lookups
    return {
        "page": schema.name,
        "loaded": cache.loaded,
        "fields": [
            {"field": name, "category": category, "options": cache.options(category)}
            for name, category in schema.lookup_fields.items()
        ],
    }
