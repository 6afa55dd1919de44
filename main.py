import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from hrforms.core.config import settings
from hrforms.api.v1.forms import router as forms_router
from hrforms.api.v1.lookups import router as lookups_router
from hrforms.api.v1.me import router as me_router
from hrforms.clients.hr_api import get_http_client, close_http_client
from hrforms.forms.sessions import form_sessions

app = FastAPI(title="HR Forms Backend")

# CORS for local frontend dev
# Build CORS allowlist from local dev + configured origins
_base_origins = {
    "http://localhost:8080",
    "http://127.0.0.1:8080",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
}
if settings.FRONTEND_BASE_URL:
    _base_origins.add(settings.FRONTEND_BASE_URL)
for o in settings.ALLOWED_ORIGINS:
    _base_origins.add(o)
# Normalize by stripping trailing slashes to match Origin header format
_allowed_origins = sorted({o.rstrip('/') for o in _base_origins if o})

app.add_middleware(
    CORSMiddleware,
    allow_origins=_allowed_origins,
    allow_origin_regex=r"^http(s)?://(localhost|127\.0\.0\.1)(:\d+)?$",
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
def read_root():
    return {"message": "Welcome to HR Forms Backend"}


@app.get("/health")
def health_check():
    return {"status": "ok", "hr_api": settings.HR_API_BASE_URL}


# Mount API routers
app.include_router(forms_router, prefix="/api/v1")
app.include_router(lookups_router, prefix="/api/v1")
app.include_router(me_router, prefix="/api/v1")


@app.on_event("startup")
async def on_startup():
    # Initialize the HR API client
    get_http_client()
    logging.getLogger("uvicorn.error").info("HR API base URL: %s", settings.HR_API_BASE_URL)


@app.on_event("shutdown")
async def on_shutdown():
    # Abandon open form sessions, then close the HR API client
    form_sessions.clear()
    await close_http_client()
