"""Remote API errors and user-facing messages."""

from typing import Any, Optional

NETWORK_ERROR = 'Network error. Please check your connection and try again.'
TIMEOUT_ERROR = 'The server took too long to respond. Please try again.'
UNKNOWN_ERROR = 'Something went wrong. Please try again.'
SESSION_EXPIRED = 'Your session has expired. Please log in again.'
REFRESH_FAILED = 'Could not refresh your session. Please log in again.'

HTTP_STATUS_MESSAGES = {
    400: 'The request was invalid.',
    401: 'You are not authorized. Please log in again.',
    403: 'You do not have permission to perform this action.',
    404: 'The requested resource was not found.',
    409: 'This record already exists.',
    422: 'The submitted data is invalid.',
    429: 'Too many requests. Please slow down.',
    500: 'The server encountered an error.',
    502: 'The server is temporarily unavailable.',
    503: 'The service is unavailable. Please try again later.',
}


class ApiError(Exception):
    """A failed call to the remote API."""

    def __init__(self, status_code: Optional[int], message: str, payload: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.payload = payload

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404

    def __repr__(self):
        return f'<ApiError {self.status_code} {self.message!r}>'


def extract_error_message(payload: Any, status_code: Optional[int] = None,
                          default: Optional[str] = None) -> str:
    """Pull the server's message out of an error body.

    NestJS-style validation errors carry a list of messages; the first one
    is shown.
    """
    if isinstance(payload, dict):
        message = payload.get('message')
        if isinstance(message, list):
            message = message[0] if message else None
        if message:
            return str(message)
    if status_code in HTTP_STATUS_MESSAGES:
        return HTTP_STATUS_MESSAGES[status_code]
    return default or UNKNOWN_ERROR
