"""Custom exceptions and RFC 7807 Problem Detail error handlers."""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

BASE_ERROR_URI = "https://hr-portal.local/errors"

logger = logging.getLogger(__name__)


# ── Exception hierarchy ─────────────────────────────────────────────

class AppException(Exception):
    """Base for all application exceptions → RFC 7807 JSON."""

    def __init__(
        self,
        status_code: int,
        error_type: str,
        title: str,
        detail: str,
        errors: Optional[dict[str, Any]] = None,
        extra: Optional[dict[str, Any]] = None,
    ) -> None:
        self.status_code = status_code
        self.error_type = error_type
        self.title = title
        self.detail = detail
        self.errors = errors
        self.extra = extra
        super().__init__(detail)


class NotFoundException(AppException):
    """404 — entity not found."""

    def __init__(self, entity_type: str, entity_id: Any) -> None:
        super().__init__(
            status_code=404,
            error_type="not-found",
            title=f"{entity_type} Not Found",
            detail=f"{entity_type} with id '{entity_id}' does not exist.",
        )


class ValidationError(AppException):
    """422 — malformed or missing business input; nothing is persisted."""

    def __init__(
        self,
        errors: dict[str, list[str]],
        detail: str = "One or more fields failed validation.",
    ) -> None:
        super().__init__(
            status_code=422,
            error_type="validation-error",
            title="Validation Error",
            detail=detail,
            errors=errors,
        )


class InvalidRangeError(ValidationError):
    """End date falls before start date."""

    def __init__(self, field: str = "end_date") -> None:
        super().__init__(
            {field: ["End date cannot be before start date."]},
            detail="End date cannot be before start date.",
        )


class PastDateError(ValidationError):
    """Leave requested for a start date already in the past."""

    def __init__(self) -> None:
        super().__init__(
            {"start_date": ["Cannot apply for leave in the past."]},
            detail="Cannot apply for leave in the past.",
        )


class ConflictError(AppException):
    """409 — unique-constraint / duplicate / overlapping record."""

    def __init__(
        self,
        detail: str,
        *,
        error_type: str = "conflict",
        errors: Optional[dict[str, Any]] = None,
        extra: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            status_code=409,
            error_type=error_type,
            title="Conflict",
            detail=detail,
            errors=errors,
            extra=extra,
        )


class DuplicateClockInError(ConflictError):
    """A second clock-in for the same employee and calendar day."""

    def __init__(self, existing_record: dict[str, Any]) -> None:
        super().__init__(
            "You have already clocked in today.",
            error_type="already-clocked-in",
            extra={"existing_record": existing_record},
        )


class OverlappingLeaveError(ConflictError):
    def __init__(self) -> None:
        super().__init__(
            "You already have a leave request for overlapping dates.",
            error_type="overlapping-leave",
            errors={"dates": ["Overlaps a pending or approved leave request."]},
        )


class DuplicateRecordConflict(ConflictError):
    """A per-day record already exists for this employee."""

    def __init__(self, entity_type: str, day: Any) -> None:
        super().__init__(
            f"{entity_type} for {day} already exists.",
            error_type="duplicate-record",
        )


class DuplicateEmployeeError(ConflictError):
    """Email or employee code already belongs to another employee."""

    def __init__(self, field: str, value: Any) -> None:
        super().__init__(
            f"Employee with {field} '{value}' already exists.",
            error_type="duplicate-employee",
            errors={field: [f"'{value}' is already taken."]},
        )


class StateTransitionError(AppException):
    """409 — the record is not in a state that permits this action."""

    def __init__(self, detail: str, *, error_type: str = "invalid-state") -> None:
        super().__init__(
            status_code=409,
            error_type=error_type,
            title="Invalid State",
            detail=detail,
        )


class InvalidTransitionError(StateTransitionError):
    def __init__(self, current: str, target: str) -> None:
        self.current = current
        self.target = target
        super().__init__(
            f"Cannot move a leave request from '{current}' to '{target}'.",
            error_type="invalid-transition",
        )


class NotClockedInError(StateTransitionError):
    def __init__(self) -> None:
        super().__init__(
            "No clock-in record found for today.",
            error_type="not-clocked-in",
        )


class AlreadyClockedOutError(StateTransitionError):
    def __init__(self) -> None:
        super().__init__(
            "You have already clocked out today.",
            error_type="already-clocked-out",
        )


class AuthorizationError(AppException):
    """403 — insufficient permissions."""

    def __init__(
        self,
        detail: str = "You do not have permission to perform this action.",
        *,
        error_type: str = "forbidden",
    ) -> None:
        super().__init__(
            status_code=403,
            error_type=error_type,
            title="Forbidden",
            detail=detail,
        )


class CheckedOutError(AuthorizationError):
    """Call data is locked once the employee has clocked out for the day."""

    def __init__(self, action: str = "edit") -> None:
        super().__init__(
            f"Cannot {action} call data after checking out.",
            error_type="checked-out",
        )


class DuplicateRecordError(Exception):
    """Raised by the storage layer when a unique key is already taken.

    Not an HTTP error: services translate it into the matching ConflictError.
    """

    def __init__(self, entity_type: str, key: dict[str, Any]) -> None:
        self.entity_type = entity_type
        self.key = key
        super().__init__(f"{entity_type} already exists for {key}")


# ── RFC 7807 builder ────────────────────────────────────────────────

def _build_problem_detail(exc: AppException, request: Request) -> dict[str, Any]:
    body: dict[str, Any] = {
        "type": f"{BASE_ERROR_URI}/{exc.error_type}",
        "title": exc.title,
        "status": exc.status_code,
        "detail": exc.detail,
        "instance": str(request.url.path),
    }
    if exc.errors:
        body["errors"] = exc.errors
    if exc.extra:
        body.update(exc.extra)
    return body


# ── FastAPI handlers ────────────────────────────────────────────────

async def _handle_app_exception(
    request: Request,
    exc: AppException,
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=_build_problem_detail(exc, request),
        media_type="application/problem+json",
    )


async def _handle_duplicate_record(
    request: Request,
    exc: DuplicateRecordError,
) -> JSONResponse:
    logger.warning("Untranslated duplicate record at %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=409,
        content={
            "type": f"{BASE_ERROR_URI}/duplicate-record",
            "title": "Conflict",
            "status": 409,
            "detail": f"{exc.entity_type} already exists.",
            "instance": str(request.url.path),
        },
        media_type="application/problem+json",
    )


async def _handle_validation_error(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    field_errors: dict[str, list[str]] = {}
    for err in exc.errors():
        loc = err.get("loc", ())
        name = (
            ".".join(str(p) for p in loc[1:])
            if len(loc) > 1
            else str(loc[0]) if loc else "unknown"
        )
        field_errors.setdefault(name, []).append(err.get("msg", "Invalid value"))

    return JSONResponse(
        status_code=422,
        content={
            "type": f"{BASE_ERROR_URI}/validation-error",
            "title": "Validation Error",
            "status": 422,
            "detail": "Request validation failed.",
            "instance": str(request.url.path),
            "errors": field_errors,
        },
        media_type="application/problem+json",
    )


# ── Registration helper (called from main.py) ──────────────────────

def register_exception_handlers(app: FastAPI) -> None:
    """Attach all custom exception handlers to the FastAPI app."""
    app.add_exception_handler(AppException, _handle_app_exception)          # type: ignore[arg-type]
    app.add_exception_handler(DuplicateRecordError, _handle_duplicate_record)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _handle_validation_error)  # type: ignore[arg-type]
