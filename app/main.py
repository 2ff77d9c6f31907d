"""
FastAPI application serving the people database page.

The page is rendered server-side; every button is a small form that posts
to one of the action routes below and is redirected back to "/".
"""
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Annotated

from fastapi import FastAPI, Form, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from app.config import get_settings
from app.deps import UIDep, build_ui
from app.db.sqlite import check_db_health
from app.logging_config import configure_logging, get_logger
from app.schemas import (
    PersonOut,
    PersonListOut,
    HealthStatus,
    ErrorResponse,
)

logger = get_logger(__name__)

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent / "templates"))

FormText = Annotated[str, Form()]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown."""
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)
    logger.info("Starting People Database...")

    app.state.ui = build_ui(settings)
    if app.state.ui.store.load_error:
        logger.warning("Started with an empty database: %s", app.state.ui.store.load_error)

    yield

    app.state.ui.table.close()
    logger.info("Shutting down...")


app = FastAPI(
    title="People Database",
    version="0.1.0",
    description="Add people to your database and manage the records",
    lifespan=lifespan,
)


# === Middleware ===

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Global exception handler for unhandled errors."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    detail = str(exc) if get_settings().DEBUG else "An unexpected error occurred"
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(error="Internal server error", detail=detail).model_dump(),
    )


def _back_to_page() -> RedirectResponse:
    return RedirectResponse(url="/", status_code=303)


# === Page ===

@app.get("/", response_class=HTMLResponse)
def index(request: Request, ui: UIDep):
    """Render the form, the toggle and (when visible) the records table."""
    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "form": ui.form,
            "table": ui.table,
            "toasts": ui.notifications.drain(),
        },
    )


# === Add Form ===

@app.post("/people")
def add_person(ui: UIDep, name: FormText = "", age: FormText = ""):
    """Add a person from the form fields."""
    ui.form.name = name
    ui.form.age = age
    ui.form.submit()
    return _back_to_page()


# === Table View ===

@app.post("/view/toggle")
def toggle_table(ui: UIDep):
    """Show or hide the records table."""
    ui.table.toggle()
    return _back_to_page()


@app.post("/people/edit/save")
def save_edit(ui: UIDep, name: FormText = "", age: FormText = ""):
    """Write the edited row fields into the edit buffers and save them."""
    if ui.table.editing_id is not None:
        ui.table.edit_name = name
        ui.table.edit_age = age
        ui.table.save()
    return _back_to_page()


@app.post("/people/edit/cancel")
def cancel_edit(ui: UIDep):
    """Leave edit mode without changing the record."""
    ui.table.cancel()
    return _back_to_page()


@app.post("/people/edit")
def start_edit(ui: UIDep, person_id: FormText = ""):
    """Switch a row into edit mode."""
    ui.table.start_edit(person_id)
    return _back_to_page()


@app.post("/people/delete")
def delete_person(ui: UIDep, person_id: FormText = ""):
    """Remove a row; unknown ids are ignored."""
    ui.table.delete(person_id)
    return _back_to_page()


# === JSON API ===

@app.get("/api/people", response_model=PersonListOut)
def list_people(ui: UIDep):
    """List all records in insertion order."""
    people = ui.store.people
    return PersonListOut(
        items=[PersonOut.model_validate(p) for p in people],
        total=len(people),
    )


# === Health Check ===

@app.get("/health", response_model=HealthStatus)
def health_check(ui: UIDep):
    """
    Health check.

    Checks:
    - Database connectivity
    - Whether stored records were readable at startup
    """
    db_health = check_db_health()

    overall_status = "ok"
    if db_health.get("status") != "healthy":
        overall_status = "unhealthy"
    elif ui.store.load_error:
        overall_status = "degraded"

    return HealthStatus(
        status=overall_status,
        service="people-db",
        timestamp=datetime.now(timezone.utc),
        database=db_health,
        records=len(ui.store),
        load_error=ui.store.load_error,
    )
