"""Structured logging helpers distilled into tiny orchestration phrases.

Purpose
    Keep every emission of diagnostic data predictable and contextual: name
    derivation, parse attempts, file indirection and discovery decisions all
    flow through the same helpers.

Contents
    - ``TRACE_ID``: context variable storing the active trace identifier.
    - ``get_logger``: returns the shared package logger (quiet by default).
    - ``bind_trace_id``: binds or clears the active trace identifier.
    - ``log_debug`` / ``log_info`` / ``log_error``: emit structured entries via a
      single private emitter.
    - ``make_event``: convenience builder for env-var centred event payloads.

System Integration
    Used by the walker visitors, adapters and the composition root. Logging is
    opt-in: the package logger only carries a ``NullHandler`` until the host
    application attaches its own handlers. Nothing here alters results.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from typing import Any, Final, Mapping, Sequence

from .domain.path import PathSegment, format_path

TRACE_ID: ContextVar[str | None] = ContextVar("lib_schema_env_config_trace_id", default=None)
"""Current trace identifier propagated through logging helpers."""

_LOGGER: Final[logging.Logger] = logging.getLogger("lib_schema_env_config")
_LOGGER.addHandler(logging.NullHandler())


def get_logger() -> logging.Logger:
    """Expose the package logger so applications may attach handlers.

    Why
        Leaves the library silent by default while giving host applications full
        control over handler and formatter configuration.
    """

    return _LOGGER


def bind_trace_id(trace_id: str | None) -> None:
    """Bind or clear the active trace identifier.

    Examples
    --------
    >>> bind_trace_id('abc123')
    >>> TRACE_ID.get()
    'abc123'
    >>> bind_trace_id(None)
    >>> TRACE_ID.get() is None
    True
    """

    TRACE_ID.set(trace_id)


def log_debug(message: str, **fields: Any) -> None:
    """Emit a structured debug log entry that includes the trace context."""

    _emit(logging.DEBUG, message, fields)


def log_info(message: str, **fields: Any) -> None:
    """Emit a structured info log entry that includes the trace context."""

    _emit(logging.INFO, message, fields)


def log_error(message: str, **fields: Any) -> None:
    """Emit a structured error log entry that includes the trace context."""

    _emit(logging.ERROR, message, fields)


def make_event(
    env_var: str | None,
    path: Sequence[PathSegment] | None,
    payload: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Build a structured logging payload centred on one environment variable.

    What
        Returns a dictionary with ``env_var`` and ``property_path`` keys (the
        path rendered dotted) and any optional payload fields.

    Examples
    --------
    >>> from lib_schema_env_config.domain.path import NamedSegment
    >>> make_event('SERVICE_TIMEOUT', (NamedSegment('service'), NamedSegment('timeout')), {'raw': '5'})
    {'env_var': 'SERVICE_TIMEOUT', 'property_path': 'service.timeout', 'raw': '5'}
    """

    event = _base_event(env_var, path)
    return _merge_payload(event, payload)


def _emit(level: int, message: str, fields: Mapping[str, Any]) -> None:
    """Send a log entry through the shared logger with contextual metadata."""

    if not _LOGGER.isEnabledFor(level):
        return
    _LOGGER.log(level, message, extra={"context": _with_trace(fields)})


def _with_trace(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Attach the current trace identifier to the provided structured fields."""

    context = {"trace_id": TRACE_ID.get()}
    context.update(fields)
    return context


def _base_event(env_var: str | None, path: Sequence[PathSegment] | None) -> dict[str, Any]:
    return {"env_var": env_var, "property_path": None if path is None else format_path(path)}


def _merge_payload(event: dict[str, Any], payload: Mapping[str, Any] | None) -> dict[str, Any]:
    """Merge optional diagnostic data into the event payload when provided."""

    if payload:
        event |= dict(payload)
    return event
