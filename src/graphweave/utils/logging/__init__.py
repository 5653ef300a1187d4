# ABOUTME: Logging configuration, progress tracking, and context binding
# ABOUTME: Provides structured logging and a rich spinner for the pipeline

from .config import LoggingMode, configure_logging, get_logging_status
from .progress import SimpleProgressTracker, create_smart_progress
from .utils import (
    get_logger,
    log_extraction_step,
    with_domain_context,
    with_operation_context,
    with_pipeline_context,
)

__all__ = [
    # Configuration
    "LoggingMode",
    "configure_logging",
    "get_logging_status",
    # Progress
    "SimpleProgressTracker",
    "create_smart_progress",
    # Utilities
    "get_logger",
    "log_extraction_step",
    "with_domain_context",
    "with_operation_context",
    "with_pipeline_context",
]
