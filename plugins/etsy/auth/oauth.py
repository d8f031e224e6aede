# plugins/etsy/auth/oauth.py
"""
Etsy OAuth Authentication Plugin
================================

This module implements an Etsy OAuth 1.0a authentication plugin for the proxy.
It delegates user login to Etsy and turns the result into an EtsyProfile.

The EtsyOAuthAuthorizationPlugin class implements the AuthorizationPlugin
interface, providing methods for:
- Initiating the Etsy OAuth flow
- Processing OAuth callbacks, including users who deny access
- Loading and normalizing the Etsy user profile
- Handing the profile to an application supplied verify callback

Signing and token exchange are done by requests-oauthlib through OAuth1Client.
Its calls block, so they run in a worker thread via asyncio.to_thread.
"""

import asyncio
import inspect
import json
import logging
from typing import Any, Callable, Dict, Mapping, Optional, Tuple
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict

from plugins import AuthorizationPlugin
from plugins.etsy.auth.client import OAuth1Client
from plugins.etsy.config import EtsyStrategyOptions
from plugins.etsy.errors import (
    APIError,
    AuthenticationFailed,
    AuthorizationDenied,
    EtsyOAuthError,
    InternalOAuthError,
    MalformedProfileError,
    ProfileParseError,
)
from plugins.etsy.profile import EtsyProfile, parse_profile

# Set up logging
logger = logging.getLogger(__name__)

VerifyCallback = Callable[[str, str, EtsyProfile], Any]


class AuthenticationResult(BaseModel):
    """Outcome of a successful Etsy login."""
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    user: Any
    profile: EtsyProfile
    token: str
    token_secret: str


def _api_error_from_body(body: Optional[str]) -> Optional[APIError]:
    """Return an APIError for an Etsy ``{"errors": [...]}`` document, if body is one."""
    if not body:
        return None
    try:
        document = json.loads(body)
    except ValueError:
        return None
    if not isinstance(document, dict):
        return None

    errors = document.get("errors")
    if not isinstance(errors, list) or not errors:
        return None
    first = errors[0] if isinstance(errors[0], dict) else {"message": str(errors[0])}
    return APIError(first.get("message") or "Etsy API error", first.get("code"))


class EtsyOAuthAuthorizationPlugin(AuthorizationPlugin):
    """
    Plugin for Etsy OAuth authorization.

    Applications may supply a ``verify`` callback which receives the access
    token, token secret and EtsyProfile and returns the application's user,
    or a falsy value if the user should not be logged in. The callback may be
    a plain function or a coroutine function. Without one, the profile itself
    is the user.

    Example:
        >>> def verify(token, token_secret, profile):
        ...     return users.find_or_create(etsy_id=profile.id)
        >>> plugin = EtsyOAuthAuthorizationPlugin(
        ...     EtsyStrategyOptions(consumer_key="key", consumer_secret="secret"),
        ...     verify=verify,
        ... )

    Class Attributes:
        service_name (str): The unique identifier for this plugin
        provider (str): Provider name attached to every profile
    """

    service_name = "etsy_oauth"
    provider = "etsy"

    def __init__(
        self,
        options: Optional[EtsyStrategyOptions] = None,
        verify: Optional[VerifyCallback] = None,
        client: Optional[OAuth1Client] = None,
    ):
        """
        Initialize the Etsy OAuth authorization plugin.

        Args:
            options (Optional[EtsyStrategyOptions]): Strategy options, read from
                the ETSY_ environment settings when omitted
            verify (Optional[VerifyCallback]): Application callback that maps a
                profile to a user
            client (Optional[OAuth1Client]): OAuth client to use instead of one
                built from the options
        """
        self.options = options or EtsyStrategyOptions.from_settings()
        self._verify = verify
        self._client = client

        if not self.options.consumer_key or not self.options.consumer_secret:
            logger.warning("Etsy OAuth plugin initialized without consumer credentials")

    @property
    def session_key(self) -> str:
        return self.options.session_key

    def get_oauth_client(self, callback_url: Optional[str] = None) -> OAuth1Client:
        """
        Get the OAuth client for Etsy's endpoints.

        Args:
            callback_url (Optional[str]): Custom callback URL for the OAuth flow

        Returns:
            OAuth1Client: The injected client, or one configured from the options
        """
        if self._client is not None:
            return self._client
        return OAuth1Client(
            self.options.consumer_key,
            self.options.consumer_secret,
            request_token_url=self.options.scoped_request_token_url,
            access_token_url=self.options.access_token_url,
            user_authorization_url=self.options.user_authorization_url,
            callback_url=callback_url or self.options.callback_url,
            timeout=self.options.timeout,
        )

    def user_authorization_params(self, force_login: Optional[Any] = None,
                                  screen_name: Optional[str] = None) -> Dict[str, Any]:
        """
        Return extra Etsy parameters for the user authorization request.

        Each parameter is only included when a value is supplied.
        """
        params = {}
        if force_login:
            params["force_login"] = force_login
        if screen_name:
            params["screen_name"] = screen_name
        return params

    def parse_error_response(self, body: str, status: Optional[int] = None) -> EtsyOAuthError:
        """
        Turn an error body from an Etsy OAuth endpoint into an error.

        Etsy does not document the format of these bodies, so the raw body is
        kept as the message.
        """
        return EtsyOAuthError(body, body=body, status_code=status)

    def _token_endpoint_error(self, error: InternalOAuthError) -> EtsyOAuthError:
        if error.data:
            return self.parse_error_response(error.data, error.status_code)
        return error

    async def get_authorization_url(
        self,
        callback_url: Optional[str] = None,
        force_login: Optional[Any] = None,
        screen_name: Optional[str] = None,
    ) -> Tuple[str, Dict[str, str]]:
        """
        Generate an Etsy authorization URL.

        This obtains a request token, which the caller must keep until the
        callback arrives, and builds the URL the user is redirected to.

        Args:
            callback_url (Optional[str]): Custom callback URL for the OAuth flow
            force_login (Optional[Any]): Ask Etsy to prompt for credentials again
            screen_name (Optional[str]): Prefill the login form with this name

        Returns:
            Tuple[str, Dict[str, str]]: The authorization URL and request token

        Raises:
            EtsyOAuthError: If the request token cannot be obtained
        """
        client = self.get_oauth_client(callback_url)
        try:
            request_token = await asyncio.to_thread(client.get_request_token)
        except InternalOAuthError as e:
            raise self._token_endpoint_error(e) from e

        params = self.user_authorization_params(force_login=force_login, screen_name=screen_name)
        redirect_url = await asyncio.to_thread(client.build_authorize_url, request_token, **params)
        return redirect_url, request_token

    async def process_callback(self, request_token: Dict[str, str],
                               oauth_verifier: str) -> Tuple[str, str, Dict[str, str]]:
        """
        Exchange the request token and verifier for an access token.

        Args:
            request_token (Dict[str, str]): The request token from get_authorization_url
            oauth_verifier (str): The OAuth verifier returned by Etsy

        Returns:
            Tuple[str, str, Dict[str, str]]: Access token, token secret and the
            full token response

        Raises:
            EtsyOAuthError: If the exchange fails
        """
        client = self.get_oauth_client()
        try:
            params = await asyncio.to_thread(client.get_access_token, request_token, oauth_verifier)
        except InternalOAuthError as e:
            raise self._token_endpoint_error(e) from e

        return params["oauth_token"], params["oauth_token_secret"], params

    def profile_url(self, params: Mapping[str, Any]) -> str:
        user_id = params.get("user_id") or "__SELF__"
        return f"{self.options.user_profile_url}?user_id={quote(str(user_id), safe='')}"

    async def user_profile(self, token: str, token_secret: str,
                           params: Mapping[str, Any]) -> EtsyProfile:
        """
        Retrieve the user profile from Etsy.

        The profile has the following properties:

          - ``id``        (equivalent to ``user_id``)
          - ``username``  (equivalent to ``login_name``)
          - ``emails``    (equivalent to ``primary_email``)

        With ``skip_extended_user_profile`` the profile is built from the
        token response parameters and no HTTP request is made.

        Raises:
            APIError: If Etsy reports an error for the profile request
            InternalOAuthError: If the profile cannot be fetched
            ProfileParseError: If the response is not valid JSON
            MalformedProfileError: If the response has no user record
        """
        if self.options.skip_extended_user_profile:
            if not params.get("user_id"):
                raise MalformedProfileError("Token response has no user_id")
            return EtsyProfile(
                id=str(params["user_id"]),
                username=params.get("screen_name"),
                provider=self.provider,
            )

        client = self.get_oauth_client()
        try:
            body = await asyncio.to_thread(client.get, self.profile_url(params), token, token_secret)
        except InternalOAuthError as e:
            api_error = _api_error_from_body(e.data)
            if api_error is not None:
                logger.error(f"Etsy API error while fetching profile: {api_error.message} ({api_error.code})")
                raise api_error from e
            logger.error(f"Failed to fetch Etsy user profile: {e}")
            raise InternalOAuthError("Failed to fetch user profile", e,
                                     data=e.data, status_code=e.status_code) from e

        try:
            document = json.loads(body)
        except ValueError as e:
            raise ProfileParseError(body=body) from e

        api_error = _api_error_from_body(body)
        if api_error is not None:
            raise api_error

        return EtsyProfile(
            **parse_profile(document),
            provider=self.provider,
            raw=body,
            raw_json=document,
        )

    async def _call_verify(self, token: str, token_secret: str, profile: EtsyProfile) -> Any:
        if self._verify is None:
            return profile
        user = self._verify(token, token_secret, profile)
        if inspect.isawaitable(user):
            user = await user
        return user

    async def authenticate(self, query: Mapping[str, Any],
                           request_token: Optional[Dict[str, str]]) -> AuthenticationResult:
        """
        Authenticate the callback request Etsy redirected the user to.

        When a user denies authorization on Etsy, they are sent back with a
        ``denied`` parameter holding the request token, e.g.
        ``/etsy/oauth/callback?denied=xxx``. That is treated as an
        authentication failure without contacting Etsy.

        Args:
            query (Mapping[str, Any]): The callback's query parameters
            request_token (Optional[Dict[str, str]]): The request token stored
                when the flow was started

        Returns:
            AuthenticationResult: The verified user, profile and access token

        Raises:
            AuthorizationDenied: If the user denied access
            AuthenticationFailed: If the callback state is invalid or the
                verify callback rejected the user
            EtsyOAuthError: For token exchange and profile errors
        """
        denied = query.get("denied")
        if denied:
            logger.info("Etsy authorization denied by user")
            raise AuthorizationDenied(denied)

        oauth_token = query.get("oauth_token")
        oauth_verifier = query.get("oauth_verifier")
        if not oauth_token or not oauth_verifier:
            raise AuthenticationFailed("Missing OAuth parameters")
        if not request_token:
            raise AuthenticationFailed("Invalid session state")
        if request_token.get("oauth_token") != oauth_token:
            raise AuthenticationFailed("OAuth token does not match the request token")

        token, token_secret, params = await self.process_callback(request_token, oauth_verifier)
        profile = await self.user_profile(token, token_secret, params)

        user = await self._call_verify(token, token_secret, profile)
        if not user:
            logger.info(f"Verify callback rejected Etsy user {profile.id}")
            raise AuthenticationFailed("User rejected by verify callback")

        return AuthenticationResult(user=user, profile=profile, token=token, token_secret=token_secret)
