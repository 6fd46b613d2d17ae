"""Errors raised by the OneNote service and their classification.

OneNote reports failures through COM HRESULT codes. Two of them describe
the state of the OneNote process rather than a problem with the page:

* ``0x800706BE`` (remote procedure call failed): OneNote is not running or
  cannot be reached. Retrying the page does not help.
* ``0x800706BA`` (RPC server unavailable): usually seen right after OneNote
  crashed. Recreating the COM handle and waiting for OneNote to restart
  lets the page export succeed.
"""

from enum import Enum

RPC_CALL_FAILED = 0x800706BE
RPC_SERVER_UNAVAILABLE = 0x800706BA


class ErrorKind(Enum):
    """Classification of an error caught while exporting a page."""

    APP_NOT_RUNNING = "app_not_running"
    RPC_UNAVAILABLE = "rpc_unavailable"
    OTHER = "other"


class NoteServiceError(Exception):
    """An operation on the OneNote application failed."""

    def __init__(self, message: str, hresult: int | None = None) -> None:
        super().__init__(message)
        self.hresult = hresult


class ServiceUnavailableError(NoteServiceError):
    """OneNote could not be reached."""


class PageMissingError(NoteServiceError):
    """The requested page does not exist (anymore) in OneNote."""


def format_hresult(hresult: int) -> str:
    return f"0x{hresult & 0xFFFFFFFF:08X}"


def error_hresult(exc: BaseException) -> int | None:
    """Unsigned HRESULT carried by an exception, if any.

    pywin32's ``com_error`` exposes a signed ``hresult``; our own
    :class:`NoteServiceError` keeps whatever was given to it.
    """
    hresult = getattr(exc, "hresult", None)
    if isinstance(hresult, int):
        return hresult & 0xFFFFFFFF
    return None


def classify_error(exc: BaseException) -> ErrorKind:
    """Map an exception to the retry policy that applies to it."""
    hresult = error_hresult(exc)
    message = str(exc).lower()
    for code, kind in (
        (RPC_CALL_FAILED, ErrorKind.APP_NOT_RUNNING),
        (RPC_SERVER_UNAVAILABLE, ErrorKind.RPC_UNAVAILABLE),
    ):
        if hresult == code or format_hresult(code).lower() in message:
            return kind
    return ErrorKind.OTHER
