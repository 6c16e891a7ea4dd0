"""FastAPI application factory and HTTP controllers.

This module defines the HTTP endpoints of the school records API.
Controllers are intentionally thin: they accept requests, delegate to
services, and return JSON responses. Domain errors raised by services
are turned into `{"message": ...}` bodies by the exception handlers
registered in `create_app`.

Endpoints implemented:
- GET/POST /api/courses, GET/PUT/DELETE /api/courses/{id}
- GET/POST /api/students, PUT/DELETE /api/students/{id}
- GET /api/dashboard/stats
- GET /api/health

Run with ``python -m school_api`` or
``uvicorn school_api.main:create_app --factory``.
"""

import json
import logging
import time
import uuid
from contextlib import asynccontextmanager
from pathlib import Path
from typing import List, Optional

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from fastapi.staticfiles import StaticFiles
from sqlmodel import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import services
from .config import Settings, get_settings
from .database import Database, get_session
from .errors import NotFoundError, ServiceError, StoreError
from .schemas import (
    CourseCreate,
    CourseOut,
    CourseUpdate,
    DashboardStats,
    HealthOut,
    MessageOut,
    StudentCreate,
    StudentOut,
    StudentUpdate,
)
from .utils.logging_setup import log_event, setup_logging
from .utils.uptime import Uptime

logger = logging.getLogger("school_api.api")
access_logger = logging.getLogger("school_api.access")

router = APIRouter(prefix="/api")


def _request_context(request: Request) -> dict:
    ctx = {
        "method": request.method,
        "path": request.url.path,
        "params": dict(request.path_params),
        "query": dict(request.query_params),
    }
    if request.method != "GET":
        ctx["body"] = getattr(request.state, "log_body", None)
    return ctx


def _decode_body(raw: bytes):
    if not raw:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        return raw[:1024].decode("utf-8", errors="replace")


async def request_log_middleware(request: Request, call_next):
    """Tag the response with a request id and log one record per request."""
    req_id = request.headers.get("X-Request-ID", uuid.uuid4().hex)
    request.state.request_id = req_id
    if request.method != "GET":
        request.state.log_body = _decode_body(await request.body())
    started = time.perf_counter()
    response: Response
    try:
        response = await call_next(request)
    except Exception as exc:
        elapsed_ms = round((time.perf_counter() - started) * 1000.0, 2)
        log_event(logger, "request_failed", {
            "request_id": req_id,
            "status": 500,
            "duration": f"{elapsed_ms}ms",
            **_request_context(request),
        }, level=logging.ERROR)
        response = await unexpected_error_handler(request, exc)
    response.headers["X-Request-ID"] = req_id
    elapsed_ms = round((time.perf_counter() - started) * 1000.0, 2)
    log_event(logger, "request_done", {
        "request_id": req_id,
        "status": response.status_code,
        "duration": f"{elapsed_ms}ms",
        **_request_context(request),
    })
    access_logger.info(
        "%s %s %s %s ms - %s",
        request.method,
        request.url.path + (f"?{request.url.query}" if request.url.query else ""),
        response.status_code,
        elapsed_ms,
        response.headers.get("content-length", "-"),
    )
    return response


async def service_error_handler(request: Request, exc: ServiceError):
    payload = {"error": type(exc).__name__, "message": exc.message, **exc.context, **_request_context(request)}
    if exc.status_code >= 500:
        log_event(logger, "service_error", payload, level=logging.ERROR, exc_info=exc)
    else:
        log_event(logger, "service_rejected", payload, level=logging.WARNING)
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


async def request_validation_handler(request: Request, exc: RequestValidationError):
    problems = []
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p != "body"]
        problems.append(f"{'.'.join(loc) or 'body'}: {err.get('msg')}")
    message = "Validation failed: " + "; ".join(problems)
    log_event(logger, "request_invalid", {"message": message, **_request_context(request)}, level=logging.WARNING)
    return JSONResponse(status_code=400, content={"message": message})


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"message": str(exc.detail)}, headers=getattr(exc, "headers", None))


async def unexpected_error_handler(request: Request, exc: Exception):
    log_event(logger, "unexpected_error", {"message": str(exc), **_request_context(request)}, level=logging.ERROR, exc_info=exc)
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


# Courses

@router.get("/courses", response_model=List[CourseOut])
def list_courses(db: Session = Depends(get_session)):
    """List all courses ordered by name."""
    return services.CourseService(db).list()


@router.post("/courses", response_model=CourseOut, status_code=201)
def create_course(payload: CourseCreate, db: Session = Depends(get_session)):
    """Create a course; the name must be unique."""
    return services.CourseService(db).create(payload)


@router.get("/courses/{course_id}", response_model=CourseOut)
def get_course(course_id: str, request: Request, db: Session = Depends(get_session)):
    """Fetch one course.

    An unknown id is reported with status 400, which is what existing
    clients of this endpoint expect.
    """
    try:
        return services.CourseService(db).get_by_id(course_id)
    except NotFoundError as e:
        log_event(logger, "service_rejected", {"error": "NotFoundError", "message": e.message, **e.context, **_request_context(request)}, level=logging.WARNING)
        return JSONResponse(status_code=400, content={"message": e.message})


@router.put("/courses/{course_id}", response_model=CourseOut)
def update_course(course_id: str, payload: CourseUpdate, db: Session = Depends(get_session)):
    """Apply a partial update and return the updated course."""
    return services.CourseService(db).update(course_id, payload)


@router.delete("/courses/{course_id}", response_model=MessageOut)
def delete_course(course_id: str, db: Session = Depends(get_session)):
    """Delete a course nobody is enrolled in."""
    services.CourseService(db).delete(course_id)
    return {"message": "Course deleted successfully"}


# Students

@router.get("/students", response_model=List[StudentOut])
def list_students(db: Session = Depends(get_session)):
    """List all students, newest first."""
    return services.StudentService(db).list()


@router.post("/students", response_model=StudentOut, status_code=201)
def create_student(payload: StudentCreate, db: Session = Depends(get_session)):
    """Create a student; the email must be unique."""
    return services.StudentService(db).create(payload)


@router.put("/students/{student_id}", response_model=StudentOut)
def update_student(student_id: str, payload: StudentUpdate, db: Session = Depends(get_session)):
    return services.StudentService(db).update(student_id, payload)


@router.delete("/students/{student_id}", response_model=MessageOut)
def delete_student(student_id: str, db: Session = Depends(get_session)):
    services.StudentService(db).delete(student_id)
    return {"message": "Student deleted successfully"}


# Dashboard + health

@router.get("/dashboard/stats", response_model=DashboardStats)
def dashboard_stats(db: Session = Depends(get_session)):
    """Student and course counts, total and active."""
    return services.DashboardService(db).get_stats()


@router.get("/health", response_model=HealthOut)
def health(request: Request):
    """Lightweight health check for uptime monitoring."""
    return {
        "status": "OK",
        "message": "The API is running smoothly",
        "uptime": str(request.app.state.uptime),
    }


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build a configured application.

    Logging and the database handle are created here, once per app, and
    kept on `app.state` (`settings`, `db`, `uptime`). Tables are created
    eagerly when the store is up; otherwise on the first request that
    reaches it.
    """
    settings = settings or get_settings()
    setup_logging(settings.LOG_LEVEL, settings.LOG_DIR)
    db = Database(settings.DATABASE_URL, echo=settings.DB_ECHO)
    try:
        db.create_db_and_tables()
        logger.info("Connected to database %s", db.engine.url.render_as_string(hide_password=True))
    except StoreError:
        # keep serving; each store-backed request retries table creation
        logger.exception("Database connection error")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        db.dispose()

    app = FastAPI(title="School Records API", lifespan=lifespan)
    app.state.settings = settings
    app.state.db = db
    app.state.uptime = Uptime()

    if settings.ALLOW_DEV_CORS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=False,
            allow_methods=["*"],
            allow_headers=["*"],
        )
    app.middleware("http")(request_log_middleware)

    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)

    app.include_router(router)

    # Serve the bundled frontend (if any) after the API routes so /api/* always wins.
    static_dir = Path(settings.STATIC_DIR)
    if static_dir.is_dir():
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="public")
    return app
