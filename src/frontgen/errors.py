"""Error types for frontgen.

Every error is local to the action that raised it; the app stays usable
after any of them.
"""

from typing import Optional


class FrontgenError(Exception):
    """Base exception for all frontgen errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(FrontgenError):
    """Raised when required configuration (the API key) is missing or invalid."""


class ValidationError(FrontgenError):
    """Raised when user input is rejected before any work is done."""


class GenerationBusyError(FrontgenError):
    """Raised when a generation is requested while another is still running.

    HTTP: 409 Conflict
    """

    def __init__(self):
        super().__init__("A generation is already in progress.")


class TransportError(FrontgenError):
    """Raised on network failure or a non-2xx response from the completion API."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        details = {"status_code": status_code} if status_code is not None else {}
        super().__init__(message, details)
        self.status_code = status_code


class EmptyResponseError(FrontgenError):
    """Raised when the completion API answers 2xx without usable content."""

    def __init__(self, message: str = "Received an empty or invalid response from the API."):
        super().__init__(message)


class DecodeError(FrontgenError):
    """Raised when a share token cannot be decoded."""


class ChatNotFoundError(FrontgenError):
    """Raised when a chat id does not exist in the session.

    HTTP: 404 Not Found
    """

    def __init__(self, chat_id: str):
        super().__init__(f"Chat not found: {chat_id}", {"chat_id": chat_id})
        self.chat_id = chat_id
