from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    FILE_NOT_SPECIFIED = "FILE_NOT_SPECIFIED"
    ACCESS_DENIED = "ACCESS_DENIED"
    FILE_NOT_FOUND = "FILE_NOT_FOUND"


_STATUS_CODES: dict[ErrorCode, int] = {
    ErrorCode.FILE_NOT_SPECIFIED: 400,
    ErrorCode.ACCESS_DENIED: 403,
    ErrorCode.FILE_NOT_FOUND: 404,
}


class MdServeError(Exception):
    """Raised by the document store for all expected request failures.

    Caught by the HTTP handlers in server.py and turned into a plain-text
    response. The Markdown core never raises it; heading extraction and
    rendering are total over their input.
    """

    def __init__(self, code: ErrorCode, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self.code]

    def to_dict(self) -> dict:
        return {
            "error": {
                "code": self.code,
                "message": self.message,
            }
        }
