# plugins/etsy/__init__.py
"""
Etsy Plugin Package for the Etsy OAuth Proxy
============================================

This package lets users log in with their Etsy account through OAuth 1.0a.

The package includes:
- EtsyOAuthAuthorizationPlugin: Runs the Etsy OAuth flow and loads the user profile
- EtsyOAuthRoutes: Provides the login and callback HTTP endpoints

Both plugins are automatically registered with the plugin system when this
package is imported.

Authentication Flow:
------------------
1. The user visits /etsy/oauth/login
2. The plugin obtains a request token (with the configured scopes) and the
   user is redirected to Etsy's sign-in page
3. Etsy redirects back to /etsy/oauth/callback, either with a verifier or
   with a ``denied`` parameter
4. The verifier is exchanged for an access token and the user's profile is
   loaded from the Etsy users endpoint
5. The verify callback maps the profile to an application user
"""

from .auth import EtsyOAuthAuthorizationPlugin
from .routes import EtsyOAuthRoutes

# Register plugins
from plugins import register_authorization_plugin, register_route_plugin

# Automatically register the plugins when this package is imported
register_authorization_plugin(EtsyOAuthAuthorizationPlugin)
register_route_plugin(EtsyOAuthRoutes)
