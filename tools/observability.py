"""Instrumentation for calls to external collaborators."""

from __future__ import annotations

import logging
import time
from functools import wraps
from typing import Any, Callable, Dict, ParamSpec, TypeVar

from planner_app.logging_config import ensure_correlation_id, get_logger, log_event
from tools.wardrobe_store import WardrobeStoreError

LOGGER = get_logger(__name__)
P = ParamSpec("P")
R = TypeVar("R")


def _preview_kwargs(kwargs: dict, max_keys: int = 6) -> dict:
    preview: dict = {}
    for idx, (key, value) in enumerate(kwargs.items()):
        if idx >= max_keys:
            preview["truncated"] = True
            break
        preview[key] = value
    return preview


def instrument_call(call_name: str) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Log start, completion and failure of an external call with its duration."""

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            correlation_id = ensure_correlation_id()
            start = time.perf_counter()
            log_event(
                LOGGER,
                logging.INFO,
                "external_call_started",
                call=call_name,
                correlation_id=correlation_id,
                kwargs=_preview_kwargs(kwargs),
            )
            try:
                result = func(*args, **kwargs)
            except Exception:
                log_event(
                    LOGGER,
                    logging.ERROR,
                    "external_call_failed",
                    call=call_name,
                    correlation_id=correlation_id,
                    duration_ms=round((time.perf_counter() - start) * 1000, 2),
                    exc_info=True,
                )
                raise
            log_event(
                LOGGER,
                logging.INFO,
                "external_call_completed",
                call=call_name,
                correlation_id=correlation_id,
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
            )
            return result

        return wrapper

    return decorator


STORE_ERROR_MESSAGE = "Could not reach your wardrobe. Please try again."


def recover_store_errors(agent: str) -> Callable[[Callable[P, Dict[str, Any]]], Callable[P, Dict[str, Any]]]:
    """Turn a store failure inside an agent method into an ``error`` result."""

    def decorator(func: Callable[P, Dict[str, Any]]) -> Callable[P, Dict[str, Any]]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> Dict[str, Any]:
            try:
                return func(*args, **kwargs)
            except WardrobeStoreError as exc:
                log_event(
                    LOGGER,
                    logging.ERROR,
                    "store_call_failed",
                    agent=agent,
                    method=func.__name__,
                    error=str(exc),
                )
                return {"status": "error", "message": STORE_ERROR_MESSAGE}

        return wrapper

    return decorator


__all__ = ["STORE_ERROR_MESSAGE", "instrument_call", "recover_store_errors"]
