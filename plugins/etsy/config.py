# plugins/etsy/config.py
"""
Configuration for the Etsy plugin

Two layers live here:

- ``EtsySettings`` reads the deployment's environment (``ETSY_`` prefix,
  optionally from ``.env``).
- ``EtsyStrategyOptions`` is the immutable option set a strategy instance is
  built from. It can be created directly or derived from the settings.
"""

from functools import lru_cache
from typing import List, Optional
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings

REQUEST_TOKEN_URL = "https://openapi.etsy.com/v2/oauth/request_token"
ACCESS_TOKEN_URL = "https://openapi.etsy.com/v2/oauth/access_token"
USER_AUTHORIZATION_URL = "https://www.etsy.com/oauth/signin"
USER_PROFILE_URL = "https://openapi.etsy.com/v2/users/__SELF__"

class EtsySettings(BaseSettings):
    """
    Etsy-specific settings

    These settings can be configured via environment variables
    prefixed with ETSY_, e.g., ETSY_CONSUMER_KEY
    """
    # OAuth settings
    CONSUMER_KEY: str = ""
    CONSUMER_SECRET: str = ""
    OAUTH_CALLBACK_URL: str = "http://localhost:8000/etsy/oauth/callback"

    # Endpoints
    REQUEST_TOKEN_URL: str = REQUEST_TOKEN_URL
    ACCESS_TOKEN_URL: str = ACCESS_TOKEN_URL
    USER_AUTHORIZATION_URL: str = USER_AUTHORIZATION_URL
    USER_PROFILE_URL: str = USER_PROFILE_URL

    # Space separated Etsy permission scopes, e.g. "email_r profile_r"
    SCOPE: str = "email_r"

    # Profile loading
    SKIP_EXTENDED_USER_PROFILE: bool = False
    SESSION_KEY: str = "oauth:etsy"
    HTTP_TIMEOUT: float = 30.0

    class Config:
        env_prefix = "ETSY_"
        env_file = ".env"
        extra = "ignore"

@lru_cache()
def get_etsy_settings():
    """
    Get the Etsy settings, cached to avoid reloading
    """
    return EtsySettings()

def build_request_token_url(request_token_url: str, scope: Optional[List[str]] = None) -> str:
    """
    Append Etsy permission scopes to the request token URL.

    Etsy expects scopes on the request token URL rather than on the
    authorization redirect. Each scope is percent-encoded and the scopes are
    joined with an encoded space.

    >>> build_request_token_url("https://example.com/request_token", ["a", "b"])
    'https://example.com/request_token?scope=a%20b'
    """
    if not scope:
        return request_token_url
    return request_token_url + "?scope=" + "%20".join(quote(s, safe="") for s in scope)

class EtsyStrategyOptions(BaseModel):
    """
    Options for an Etsy OAuth strategy.

    Instances are frozen; the scoped request token URL is derived on access
    instead of being written back into the options.
    """
    model_config = ConfigDict(frozen=True)

    consumer_key: str = ""
    consumer_secret: str = ""
    callback_url: Optional[str] = None
    request_token_url: str = REQUEST_TOKEN_URL
    access_token_url: str = ACCESS_TOKEN_URL
    user_authorization_url: str = USER_AUTHORIZATION_URL
    user_profile_url: str = USER_PROFILE_URL
    scope: List[str] = Field(default_factory=list)
    skip_extended_user_profile: bool = False
    session_key: str = "oauth:etsy"
    timeout: float = 30.0

    @property
    def scoped_request_token_url(self) -> str:
        return build_request_token_url(self.request_token_url, self.scope)

    @classmethod
    def from_settings(cls, settings: Optional[EtsySettings] = None) -> "EtsyStrategyOptions":
        settings = settings or get_etsy_settings()
        return cls(
            consumer_key=settings.CONSUMER_KEY,
            consumer_secret=settings.CONSUMER_SECRET,
            callback_url=settings.OAUTH_CALLBACK_URL,
            request_token_url=settings.REQUEST_TOKEN_URL,
            access_token_url=settings.ACCESS_TOKEN_URL,
            user_authorization_url=settings.USER_AUTHORIZATION_URL,
            user_profile_url=settings.USER_PROFILE_URL,
            scope=settings.SCOPE.split(),
            skip_extended_user_profile=settings.SKIP_EXTENDED_USER_PROFILE,
            session_key=settings.SESSION_KEY,
            timeout=settings.HTTP_TIMEOUT,
        )
