# plugins/etsy/errors.py
"""
Errors raised by the Etsy OAuth plugin.

Every error derives from EtsyOAuthError so route handlers can catch the
whole family with a single clause.
"""

from typing import Any, Optional, Union


class EtsyOAuthError(Exception):
    """Base class for Etsy OAuth errors."""

    def __init__(self, message: str, body: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.body = body
        self.status_code = status_code


class AuthorizationDenied(EtsyOAuthError):
    """The user declined to authorize the application on Etsy."""

    def __init__(self, denied_token: Optional[str] = None):
        super().__init__("User denied authorization")
        self.denied_token = denied_token


class AuthenticationFailed(EtsyOAuthError):
    """The callback could not be turned into an authenticated user."""


class InternalOAuthError(EtsyOAuthError):
    """
    Wraps a failure raised by the OAuth client or the HTTP transport.

    ``data`` holds the response body of the failed request when there was
    one, so callers can look for a provider error document in it.
    """

    def __init__(self, message: str, oauth_error: Optional[BaseException] = None,
                 data: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message, body=data, status_code=status_code)
        self.oauth_error = oauth_error

    @property
    def data(self) -> Optional[str]:
        return self.body

    def __str__(self) -> str:
        if self.oauth_error is not None:
            return f"{self.message}: {self.oauth_error}"
        return self.message


class APIError(EtsyOAuthError):
    """An error reported by the Etsy API in an ``errors`` list."""

    def __init__(self, message: str, code: Union[str, int, None] = None):
        super().__init__(message)
        self.code = code

    def __repr__(self) -> str:
        return f"APIError(message={self.message!r}, code={self.code!r})"


class ProfileParseError(EtsyOAuthError, ValueError):
    """A profile response body was not valid JSON."""

    def __init__(self, message: str = "Failed to parse user profile", body: Any = None):
        super().__init__(message, body=body)


class MalformedProfileError(EtsyOAuthError, ValueError):
    """A profile response parsed as JSON but did not contain a user record."""
