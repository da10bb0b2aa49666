"""Structured logging utilities with context support."""

import functools
import logging
import threading
from typing import Any, Callable, Dict, Optional

# Thread-local storage for log context
_thread_local = threading.local()


def get_log_context() -> Dict[str, Any]:
    """
    Get a copy of the structured fields active on this thread.

    Returns:
        Mapping of field name to value (empty outside any LogContext)
    """
    return dict(getattr(_thread_local, "context", {}))


class LogContext:
    """
    Context manager for adding structured fields to log records.

    Fields are kept in thread-local storage and attached to every record
    emitted inside the block by ContextFilter. Contexts nest: inner fields
    are merged over outer ones and the outer set is restored on exit.

    Example:
        with LogContext(user_id=str(user_id), operation="save"):
            logger.info("Saving timesheets")
            # Record carries user_id and operation fields
    """

    def __init__(self, **fields: Any):
        self.fields = fields
        self._previous: Optional[Dict[str, Any]] = None

    def __enter__(self) -> "LogContext":
        self._previous = get_log_context()
        merged = dict(self._previous)
        merged.update(self.fields)
        _thread_local.context = merged
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        _thread_local.context = self._previous or {}


class ContextFilter(logging.Filter):
    """Logging filter that copies LogContext fields onto log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in get_log_context().items():
            setattr(record, key, value)
        return True


def log_function_call(
    func: Optional[Callable] = None, *, include_args: bool = False, level: str = "DEBUG"
) -> Callable:
    """
    Decorator to log function entry and exit.

    Exceptions are logged with traceback and re-raised.

    Args:
        func: Function to decorate (when used without arguments)
        include_args: Whether to include function arguments in logs
        level: Log level to use for entry and exit

    Returns:
        Decorated function

    Example:
        @log_function_call
        def submit_timesheets(self, user_id):
            ...

        @log_function_call(include_args=True, level="INFO")
        def duplicate_efforts(self, user_id, request):
            ...
    """

    def decorator(f: Callable) -> Callable:
        @functools.wraps(f)
        def wrapper(*args, **kwargs):
            logger = logging.getLogger(f.__module__)
            log_level = getattr(logging, level.upper())

            if include_args:
                signature = ", ".join(
                    [repr(a) for a in args] + [f"{k}={v!r}" for k, v in kwargs.items()]
                )
                logger.log(log_level, f"Entering {f.__name__} with args: {signature}")
            else:
                logger.log(log_level, f"Entering {f.__name__}")

            try:
                result = f(*args, **kwargs)
            except Exception as e:
                logger.error(
                    f"Exception in {f.__name__}: {type(e).__name__}: {e}",
                    exc_info=True,
                )
                raise

            logger.log(log_level, f"Exiting {f.__name__}")
            return result

        return wrapper

    if func is None:
        return decorator
    return decorator(func)
