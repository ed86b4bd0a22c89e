from fastapi import FastAPI, Request, status
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from campus_attendance.api.v1.absences.router import admin_router as absence_log_router
from campus_attendance.api.v1.absences.router import router as absences_router
from campus_attendance.api.v1.auth.router import router as auth_router
from campus_attendance.api.v1.classes.router import router as classes_router
from campus_attendance.api.v1.classes.router import teacher_router as teacher_classes_router
from campus_attendance.api.v1.day_orders.router import admin_router as day_order_admin_router
from campus_attendance.api.v1.day_orders.router import router as day_order_router
from campus_attendance.api.v1.scheduled_sessions.router import router as scheduled_sessions_router
from campus_attendance.api.v1.sessions.router import router as sessions_router
from campus_attendance.api.v1.subjects.router import router as subjects_router
from campus_attendance.api.v1.teacher_subjects.router import router as teacher_subjects_router
from campus_attendance.api.v1.users.router import router as users_router
from campus_attendance.core.logging import configure_logging


# Attendance-facing routes answer failures as {success: false, error}.
ENVELOPE_PREFIXES = ("/api/v1/teacher/", "/api/v1/sessions")


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path"))
    message = first.get("msg", "Invalid value")
    return f"Invalid {field}: {message}" if field else message


async def attendance_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    if request.url.path.startswith(ENVELOPE_PREFIXES):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"success": False, "error": _validation_message(exc)},
        )
    return await request_validation_exception_handler(request, exc)


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(title="Campus Attendance Backend")
    app.add_exception_handler(RequestValidationError, attendance_validation_handler)

    # CORS: allow the web and mobile clients to call this API
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routers
    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(classes_router)
    app.include_router(teacher_classes_router)
    app.include_router(subjects_router)
    app.include_router(teacher_subjects_router)
    app.include_router(day_order_router)
    app.include_router(day_order_admin_router)
    app.include_router(scheduled_sessions_router)
    app.include_router(sessions_router)
    app.include_router(absences_router)
    app.include_router(absence_log_router)

    return app


app = create_app()
