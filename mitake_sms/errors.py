from __future__ import annotations

from typing import Optional


class MitakeSmsError(Exception):
    """Base error for non-200 gateway answers.

    Raised as-is for statuses that have no dedicated subclass. Transport
    failures (DNS, connect or read timeouts) are not wrapped; they surface as
    ``httpx.TransportError``.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class AuthenticationError(MitakeSmsError):
    pass


class InvalidRequestError(MitakeSmsError):
    pass


class ServerError(MitakeSmsError):
    pass


def error_for_status(status_code: int) -> MitakeSmsError:
    if status_code == 401:
        return AuthenticationError("Invalid username or password", status_code=status_code)
    if status_code == 400:
        return InvalidRequestError("Invalid request parameters", status_code=status_code)
    if 500 <= status_code <= 599:
        return ServerError(f"Server error: {status_code}", status_code=status_code)
    return MitakeSmsError(f"Unexpected error: {status_code}", status_code=status_code)
