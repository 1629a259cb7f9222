"""Failure taxonomy for the formatter.

Every error carries the HTTP status and the classification code reported to
clients in the ``{"error": ..., "code": ...}`` payload.
"""

from typing import Optional


class FormatterError(Exception):
    status_code = 500
    code = "InternalError"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_payload(self) -> dict:
        return {"error": self.message, "code": self.code}


class BadInput(FormatterError):
    status_code = 400
    code = "BadInput"


class StyleError(BadInput):
    """The style document could not be parsed into a CSL style."""


class UnsupportedLocale(FormatterError):
    status_code = 422
    code = "UnsupportedLocale"

    def __init__(self, locale: Optional[str]):
        super().__init__(f"Unsupported locale: {locale}")
        self.locale = locale


class EngineFailure(FormatterError):
    status_code = 500
    code = "InternalError"


class PayloadTooLarge(FormatterError):
    status_code = 413
    code = "PayloadTooLarge"
