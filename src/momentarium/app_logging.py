"""Logging configuration helpers."""

import logging

_FORMAT = "%(levelname)s: %(name)s: [job=%(job_id)s] %(message)s"


class JobContextFilter(logging.Filter):
    """Default the ``job_id`` record attribute for records logged without one."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "job_id"):
            record.job_id = "-"
        return True


def configure_logging(level: str = "INFO") -> None:
    """Configure the package logger once with a job-aware stream handler."""
    logger = logging.getLogger("momentarium")
    logger.setLevel(level.upper())
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.addFilter(JobContextFilter())
    handler.setFormatter(logging.Formatter(_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
