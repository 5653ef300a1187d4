# ABOUTME: Logger utilities with context binding and operation tracking decorators
# ABOUTME: Provides get_logger function and decorators for consistent structured logging

import functools
import inspect
import time
import uuid
from collections.abc import Callable
from typing import Any, TypeVar

import structlog

# Type variable for decorated functions
F = TypeVar("F", bound=Callable[..., Any])


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a logger instance with automatic module detection.

    Args:
        name: Logger name, auto-detected from caller if None

    Returns:
        Configured structlog logger instance
    """
    if name is None:
        frame = inspect.currentframe()
        if frame and frame.f_back:
            # Get the module name of the caller
            name = frame.f_back.f_globals.get("__name__", "unknown")

    return structlog.get_logger(name or "graphweave")


def generate_operation_id() -> str:
    """Generate a unique operation ID for tracking requests."""
    return str(uuid.uuid4())[:8]


def _elapsed(start_time: float) -> float:
    return round(time.time() - start_time, 3)


def _log_failure(bound_logger, message: str, start_time: float, error: Exception) -> None:
    bound_logger.error(
        message,
        duration_seconds=_elapsed(start_time),
        error=str(error),
        error_type=type(error).__name__,
        success=False,
    )


def with_operation_context(operation: str, **context) -> Callable[[F], F]:
    """Decorator to add operation context to function logging.

    Works for both plain and ``async def`` functions; coroutine functions are
    awaited inside the logged span.

    Args:
        operation: Operation name for logging
        **context: Additional context to bind to logger

    Returns:
        Decorated function with operation logging
    """

    def decorator(func: F) -> F:
        def _bind():
            return get_logger(func.__module__).bind(
                operation=operation, operation_id=generate_operation_id(), function=func.__name__, **context
            )

        if inspect.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args, **kwargs):
                bound_logger = _bind()
                bound_logger.info(f"Starting {operation}")
                start_time = time.time()
                try:
                    result = await func(*args, **kwargs)
                except Exception as e:
                    _log_failure(bound_logger, f"Failed {operation}", start_time, e)
                    raise
                bound_logger.info(f"Completed {operation}", duration_seconds=_elapsed(start_time), success=True)
                return result

            return async_wrapper  # type: ignore[return-value]

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            bound_logger = _bind()
            bound_logger.info(f"Starting {operation}")
            start_time = time.time()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                _log_failure(bound_logger, f"Failed {operation}", start_time, e)
                raise
            bound_logger.info(f"Completed {operation}", duration_seconds=_elapsed(start_time), success=True)
            return result

        return wrapper  # type: ignore[return-value]

    return decorator


def log_extraction_step(step_name: str) -> Callable[[F], F]:
    """Decorator to log one stage of the per-document extraction pipeline.

    The wrapped callable's ``domain`` (keyword argument or ``self.domain``) is
    bound to the logger, and the size of a sized result is reported.

    Args:
        step_name: Name of the extraction step

    Returns:
        Decorated function with extraction step logging
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            domain = kwargs.get("domain")
            if domain is None and args:
                domain = getattr(args[0], "domain", None)

            bound_logger = get_logger(func.__module__).bind(
                step=step_name, domain=domain, pipeline="graph_extraction"
            )
            bound_logger.debug(f"Starting extraction step: {step_name}")
            start_time = time.time()

            try:
                result = func(*args, **kwargs)
            except Exception as e:
                _log_failure(bound_logger, f"Failed extraction step: {step_name}", start_time, e)
                raise

            result_info = {"result_count": len(result)} if hasattr(result, "__len__") else {}
            bound_logger.debug(
                f"Completed extraction step: {step_name}",
                duration_seconds=_elapsed(start_time),
                success=True,
                **result_info,
            )
            return result

        return wrapper  # type: ignore[return-value]

    return decorator


class LogContext:
    """Context manager for binding logger context."""

    def __init__(self, logger: structlog.stdlib.BoundLogger, **context):
        self.logger = logger
        self.context = context
        self.bound_logger = None

    def __enter__(self) -> structlog.stdlib.BoundLogger:
        self.bound_logger = self.logger.bind(**self.context)
        return self.bound_logger

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is not None and self.bound_logger is not None:
            self.bound_logger.error("Context operation failed", error=str(exc_val), error_type=exc_type.__name__)


def with_domain_context(domain: str) -> LogContext:
    """Create a logging context for operations on one domain's graph.

    Args:
        domain: Domain whose graph is being processed

    Returns:
        LogContext manager with domain context
    """
    return LogContext(get_logger(), domain=domain, record_type="knowledge_graph")


def with_pipeline_context(pipeline_name: str, **context) -> LogContext:
    """Create a logging context for pipeline operations.

    Args:
        pipeline_name: Name of the pipeline
        **context: Additional context to bind

    Returns:
        LogContext manager with pipeline context
    """
    return LogContext(get_logger(), pipeline=pipeline_name, operation_id=generate_operation_id(), **context)
