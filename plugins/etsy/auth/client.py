# plugins/etsy/auth/client.py
"""
OAuth 1.0a client used by the Etsy authorization plugin.

Request signing, token exchange and transport are left to requests-oauthlib.
This wrapper fixes the Etsy endpoints and maps library failures onto
InternalOAuthError so the plugin only has to deal with one error type.
"""

import logging
from typing import Any, Dict, Optional

import requests
from requests_oauthlib import OAuth1Session
from requests_oauthlib.oauth1_session import TokenMissing, TokenRequestDenied

from plugins.etsy.errors import InternalOAuthError

logger = logging.getLogger(__name__)

_CLIENT_ERRORS = (TokenRequestDenied, TokenMissing, requests.RequestException)


def _error_response(error: BaseException) -> Optional[requests.Response]:
    return getattr(error, "response", None)


def _wrap(message: str, error: BaseException) -> InternalOAuthError:
    response = _error_response(error)
    if response is None:
        return InternalOAuthError(message, error)
    return InternalOAuthError(message, error, data=response.text, status_code=response.status_code)


class OAuth1Client:
    """
    Thin OAuth 1.0a client bound to one provider's endpoints.

    Args:
        consumer_key (str): The application's consumer key
        consumer_secret (str): The application's consumer secret
        request_token_url (str): URL to obtain an unauthorized request token
        access_token_url (str): URL to exchange an authorized request token
        user_authorization_url (str): URL the user is redirected to
        callback_url (Optional[str]): URL the provider redirects back to
        timeout (float): Timeout in seconds for every HTTP call
    """

    def __init__(
        self,
        consumer_key: str,
        consumer_secret: str,
        request_token_url: str,
        access_token_url: str,
        user_authorization_url: str,
        callback_url: Optional[str] = None,
        timeout: float = 30.0,
    ):
        self.consumer_key = consumer_key
        self.consumer_secret = consumer_secret
        self.request_token_url = request_token_url
        self.access_token_url = access_token_url
        self.user_authorization_url = user_authorization_url
        self.callback_url = callback_url
        self.timeout = timeout

    def _session(self, **kwargs) -> OAuth1Session:
        return OAuth1Session(self.consumer_key, client_secret=self.consumer_secret, **kwargs)

    def get_request_token(self) -> Dict[str, str]:
        """
        Obtain an unauthorized request token.

        Returns:
            Dict[str, str]: The token response, including ``oauth_token`` and
            ``oauth_token_secret``

        Raises:
            InternalOAuthError: If the provider refuses or cannot be reached
        """
        session = self._session(callback_uri=self.callback_url)
        try:
            return session.fetch_request_token(self.request_token_url, timeout=self.timeout)
        except _CLIENT_ERRORS as e:
            logger.error(f"Failed to obtain Etsy request token: {e}")
            raise _wrap("Failed to obtain request token", e) from e

    def build_authorize_url(self, request_token: Dict[str, str], **params: Any) -> str:
        """Build the user authorization URL for ``request_token`` with extra query parameters."""
        session = self._session()
        return session.authorization_url(
            self.user_authorization_url,
            request_token=request_token["oauth_token"],
            **params
        )

    def get_access_token(self, request_token: Dict[str, str], verifier: str) -> Dict[str, str]:
        """
        Exchange an authorized request token for an access token.

        Returns:
            Dict[str, str]: The token response. Besides ``oauth_token`` and
            ``oauth_token_secret`` it holds any extra parameters the provider
            sent back.

        Raises:
            InternalOAuthError: If the exchange fails
        """
        session = self._session(
            resource_owner_key=request_token["oauth_token"],
            resource_owner_secret=request_token.get("oauth_token_secret"),
            verifier=verifier,
        )
        try:
            return session.fetch_access_token(self.access_token_url, timeout=self.timeout)
        except _CLIENT_ERRORS as e:
            logger.error(f"Failed to obtain Etsy access token: {e}")
            raise _wrap("Failed to obtain access token", e) from e

    def get(self, url: str, token: str, token_secret: str) -> str:
        """
        Issue a signed GET request and return the response body.

        Raises:
            InternalOAuthError: On transport errors and non-2xx responses. The
            response body is available as ``data``.
        """
        session = self._session(resource_owner_key=token, resource_owner_secret=token_secret)
        try:
            response = session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise _wrap(f"Request to {url} failed", e) from e

        if not response.ok:
            raise InternalOAuthError(
                f"Request to {url} returned HTTP {response.status_code}",
                data=response.text,
                status_code=response.status_code,
            )
        return response.text
