"""Error taxonomy — Normalizes Elasticsearch error bodies.

Elasticsearch reports failures as a typed error object, e.g.::

    {
      "error": {
        "type": "index_not_found_exception",
        "reason": "no such index [movies]",
        "caused_by": {"type": "...", "reason": "..."}
      },
      "status": 404
    }

Bulk responses carry the same object per item. Every such body is parsed
into a ``BackendError`` and translated into a ``NormalizedError`` through a
fixed table keyed by the error type. Types absent from the table keep the
backend's own status and reason.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TypeGuard

from searchport.models.result import NormalizedError

DEFAULT_REASON = "an error occurred"
DEFAULT_STATUS = 500


@dataclass(frozen=True, slots=True)
class ErrorContext:
    """What an operation was acting on, used to fill message templates."""

    subject: str
    index: str


@dataclass(frozen=True, slots=True)
class BackendError:
    """An Elasticsearch error, parsed but not yet normalized."""

    type: str
    reason: str
    status: int


# type -> (status, message template over subject, index and reason)
ERROR_TABLE: dict[str, tuple[int, str]] = {
    "resource_already_exists_exception": (409, "{subject} already exists"),
    "mapper_parsing_exception": (422, "failed to parse mapping for {subject}: {reason}"),
    "index_not_found_exception": (404, "{index} not found"),
    "resource_not_found_exception": (404, "{subject} not found"),
    "not_found": (404, "{subject} not found"),
}


def to_backend_error(body: Any, fallback_status: int | None = None) -> BackendError:
    """Parse an error body into a ``BackendError``.

    The reason prefers a nested ``caused_by`` reason, then the top-level
    reason. The status prefers the one embedded in the body, then
    ``fallback_status`` (usually the HTTP status).

    Args:
        body: A response body (``{"error": {...}, "status": ...}``), a bare
            error object, or raw response text.
        fallback_status: Status to use when the body carries none.

    Returns:
        The parsed error.
    """
    status = fallback_status if fallback_status is not None else DEFAULT_STATUS

    if not isinstance(body, dict):
        reason = body.strip() if isinstance(body, str) and body.strip() else DEFAULT_REASON
        return BackendError(type="unknown", reason=reason, status=status)

    status = _as_status(body.get("status"), status)
    err = body.get("error", body)

    if isinstance(err, str):
        return BackendError(type="unknown", reason=err, status=status)
    if not isinstance(err, dict):
        return BackendError(type="unknown", reason=DEFAULT_REASON, status=status)

    caused_by = err.get("caused_by")
    reason = caused_by.get("reason") if isinstance(caused_by, dict) else None
    if reason is None:
        reason = err.get("reason")
    if reason is None:
        reason = DEFAULT_REASON

    err_type = err.get("type")
    if err_type is None:
        # Document misses answer {"found": false} (GET) or {"result": "not_found"} (DELETE)
        missing = err.get("found") is False or err.get("result") == "not_found"
        err_type = "not_found" if missing else "unknown"

    return BackendError(type=err_type, reason=str(reason), status=_as_status(err.get("status"), status))


def translate_error(error: BackendError, context: ErrorContext) -> NormalizedError:
    """Map a ``BackendError`` onto the caller-facing taxonomy."""
    entry = ERROR_TABLE.get(error.type)
    if entry is None:
        return NormalizedError(status=error.status, msg=error.reason)

    status, template = entry
    return NormalizedError(
        status=status,
        msg=template.format(subject=context.subject, index=context.index, reason=error.reason),
    )


def is_failure(value: object) -> TypeGuard[NormalizedError]:
    """Whether an intermediate value should short-circuit an operation.

    Failures are recognized by type alone. Success payloads (documents,
    backend responses) pass through even when they contain ``ok: false`` or
    lack an id, since their contents are not ours to interpret.
    """
    return isinstance(value, NormalizedError)


def _as_status(value: Any, default: int) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return default
