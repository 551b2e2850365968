import sys
import logging


def error_message_detail(error: Exception, error_detail: sys) -> str:
    """
    Build a detailed error message including file name and line number.

    Args:
        error (Exception): The exception (or message) being reported.
        error_detail (sys): The sys module, used to reach the active traceback.

    Returns:
        str: Formatted error message string.
    """
    _, _, exc_tb = error_detail.exc_info()

    if exc_tb is not None:
        file_name = exc_tb.tb_frame.f_code.co_filename
        line_number = exc_tb.tb_lineno
        error_message = (
            f"Error occurred in file: [{file_name}] "
            f"at line number [{line_number}] "
            f"with error: {str(error)}"
        )
    else:
        error_message = f"Error occurred: {str(error)} (no traceback available)"

    logging.error(error_message)
    return error_message


class AppException(Exception):
    """
    Application-level exception for standardized error handling.

    ``message`` keeps the plain text shown to callers and written to the run log;
    ``error_message`` carries the traceback location for the log files.
    """

    def __init__(self, error_message, error_detail: sys):
        super().__init__(str(error_message))
        self.message = str(error_message)
        self.error_message = error_message_detail(error_message, error_detail)

    def __str__(self) -> str:
        return self.error_message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


class GatewayError(AppException):
    """The inference gateway failed to produce a usable structured result."""


class ParseError(AppException):
    """Raw webhook text is not well-formed JSON."""


class FatalStageError(AppException):
    """A pipeline stage failed; the rest of the run is skipped."""

    def __init__(self, stage: str, error, error_detail: sys):
        self.stage = stage
        message = error.message if isinstance(error, AppException) else str(error)
        super().__init__(message, error_detail)
