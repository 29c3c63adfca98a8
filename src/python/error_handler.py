"""
Error reporting for the emission timeline.

The timeline view itself never raises for bad input; it ignores stale
requests. Errors come from the host side (reading and writing emission set
files) and are reported here so every failure lands in the log the same way.
"""

import logging

logger = logging.getLogger("timeline.error_handler")


class EmissionFileError(RuntimeError):
    """Raised when an emission set file cannot be read or has an invalid structure."""


class ErrorHandler:
    """Static helpers that log failures with a consistent layout."""

    @staticmethod
    def log_exception(e: Exception, context: str = "") -> str:
        """Log `e` with its traceback.

        Returns:
            str: "<ExceptionType>: <message>", for display
        """
        summary = f"{type(e).__name__}: {e}"
        if context:
            logger.error("%s: %s", context, summary, exc_info=e)
        else:
            logger.error("%s", summary, exc_info=e)
        return summary

    @staticmethod
    def show_error(message: str, title: str = "Error") -> None:
        logger.error("[%s] %s", title, message)

    @classmethod
    def report(cls, e: Exception, context: str, title: str) -> str:
        """Log the exception and a titled error line for it."""
        summary = cls.log_exception(e, context)
        cls.show_error(str(e), title=title)
        return summary
