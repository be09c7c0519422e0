"""
Logging infrastructure for the business DNA pipeline.

Provides:
- Millisecond timestamps and aligned levels
- Optional stage prefix (e.g., "crawl", "vision")
- Console and optional file output
- Warning/error tracking for the end-of-run summary
"""

import logging
import sys
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Optional

THIRD_PARTY_LOGGERS = ["urllib3", "requests", "httpx", "httpcore", "PIL"]


class MillisecondsFormatter(logging.Formatter):
    """Formatter that appends milliseconds to the timestamp."""

    def formatTime(self, record, datefmt=None):  # noqa: N802 - must match parent class method name
        ct = datetime.fromtimestamp(record.created)
        return ct.strftime(datefmt or "%Y-%m-%d %H:%M:%S") + f",{int(record.msecs):03d}"


def _format_string(stage: Optional[str]) -> str:
    if stage:
        return f"%(asctime)s | %(levelname)-8s | {stage} | %(filename)s:%(lineno)d | %(message)s"
    return "%(asctime)s | %(levelname)-8s | %(filename)s:%(lineno)d | %(message)s"


def _with_fields(message: str, fields: dict) -> str:
    if not fields:
        return message
    formatted = " ".join(f"{k}={v}" for k, v in fields.items())
    return f"{message} [{formatted}]"


class PipelineLogger:
    """
    Centralized logger for a pipeline run with structured key=value output.

    Every component accepts one of these (or a plain ``logging.Logger``);
    warnings and errors are also recorded so the CLI can print a summary.
    """

    def __init__(
        self,
        name: str = "business_dna",
        log_level: str = "INFO",
        log_file: Optional[str] = None,
        log_dir: Optional[Path] = None,
        stage: Optional[str] = None,
    ):
        """
        Initialize the pipeline logger.

        Args:
            name: Logger name
            log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
            log_file: Optional log file name
            log_dir: Directory for log files (defaults to ./logs)
            stage: Optional stage label included in every line
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, log_level.upper()))
        self.stage = stage

        # Own handlers only; avoid duplicate lines through the root logger
        self.logger.propagate = False
        if self.logger.handlers:
            self.logger.handlers.clear()

        formatter = MillisecondsFormatter(_format_string(stage))

        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(getattr(logging, log_level.upper()))
        console_handler.setFormatter(formatter)
        self.logger.addHandler(console_handler)

        if log_file:
            log_dir = log_dir or Path.cwd() / "logs"
            log_dir.mkdir(parents=True, exist_ok=True)
            log_path = log_dir / log_file

            file_handler = logging.FileHandler(log_path)
            file_handler.setLevel(logging.DEBUG)  # Log everything to file
            file_handler.setFormatter(formatter)
            self.logger.addHandler(file_handler)

            self.info(f"Logging to file: {log_path}")

        self.errors = []
        self.warnings = []

    def debug(self, message: str, **kwargs):
        """Log debug message with optional structured data."""
        self.logger.debug(_with_fields(message, kwargs), stacklevel=2)

    def info(self, message: str, **kwargs):
        """Log info message with optional structured data."""
        self.logger.info(_with_fields(message, kwargs), stacklevel=2)

    def warning(self, message: str, **kwargs):
        """Log warning message and track for reporting."""
        message = _with_fields(message, kwargs)
        self.logger.warning(message, stacklevel=2)
        self.warnings.append(
            {
                "message": message,
                "timestamp": datetime.now().isoformat(),
                "data": kwargs,
            }
        )

    def error(self, message: str, exception: Optional[Exception] = None, **kwargs):
        """Log error message and track for reporting."""
        if exception:
            message = f"{message} | Exception: {exception}"
        message = _with_fields(message, kwargs)
        self.logger.error(message, exc_info=exception is not None, stacklevel=2)
        self.errors.append(
            {
                "message": message,
                "exception": str(exception) if exception else None,
                "timestamp": datetime.now().isoformat(),
                "data": kwargs,
            }
        )

    def log_run_start(self, url: str, max_pages: int):
        self.info("=" * 60)
        self.info("Business DNA extraction started", url=url, max_pages=max_pages)
        self.info("=" * 60)

    def log_run_complete(self, business_name: str, pages: int, sparsity: str, duration_seconds: float):
        self.info("=" * 60)
        self.info(
            "Business DNA extraction completed",
            business_name=business_name,
            pages=pages,
            sparsity=sparsity,
            warnings=len(self.warnings),
            errors=len(self.errors),
            duration_seconds=round(duration_seconds, 2),
        )
        self.info("=" * 60)

    @contextmanager
    def time_stage(self, stage: str, **context):
        """
        Time one pipeline stage and log its outcome.

        Usage:
            with logger.time_stage("crawl", url=url):
                ...
        """
        start_time = datetime.now()
        self.debug(f"Starting {stage}", **context)
        try:
            yield
        except Exception as e:
            duration = (datetime.now() - start_time).total_seconds()
            self.error(f"Failed {stage}", exception=e, duration_seconds=round(duration, 2), **context)
            raise
        duration = (datetime.now() - start_time).total_seconds()
        self.info(f"Completed {stage}", duration_seconds=round(duration, 2), **context)

    def get_error_summary(self) -> dict:
        """Get summary of errors and warnings for reporting."""
        return {
            "total_errors": len(self.errors),
            "total_warnings": len(self.warnings),
            "errors": self.errors,
            "warnings": self.warnings,
        }

    def clear_tracking(self):
        """Clear tracked errors and warnings (useful between runs)."""
        self.errors = []
        self.warnings = []


# ============================================================================
# Global Configuration
# ============================================================================


def configure_global_logging(log_level: str = "INFO"):
    """
    Route root and third-party library loggers through the unified format.

    Call this early in CLI startup so module-level ``logging.getLogger(__name__)``
    loggers used inside the package print the same layout.
    """
    formatter = MillisecondsFormatter(_format_string(None))

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper()))
    root_logger.handlers.clear()

    root_handler = logging.StreamHandler(sys.stderr)
    root_handler.setLevel(getattr(logging, log_level.upper()))
    root_handler.setFormatter(formatter)
    root_logger.addHandler(root_handler)

    # HTTP client chatter stays at WARNING unless explicitly debugging
    lib_level = logging.DEBUG if log_level.upper() == "DEBUG" else logging.WARNING
    for lib_name in THIRD_PARTY_LOGGERS:
        lib_logger = logging.getLogger(lib_name)
        lib_logger.handlers.clear()
        lib_logger.propagate = True
        lib_logger.setLevel(lib_level)
