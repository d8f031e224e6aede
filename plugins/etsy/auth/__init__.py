# plugins/etsy/auth/__init__.py
"""
Etsy Authorization Plugins
==========================

This package contains the Etsy OAuth 1.0a authorization plugin and the
OAuth client it is built on.
"""

from .client import OAuth1Client
from .oauth import AuthenticationResult, EtsyOAuthAuthorizationPlugin

__all__ = ['OAuth1Client', 'AuthenticationResult', 'EtsyOAuthAuthorizationPlugin']
