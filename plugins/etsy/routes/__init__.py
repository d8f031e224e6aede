# plugins/etsy/routes/__init__.py
"""
Etsy Routes
===========

FastAPI route definitions for the Etsy plugin. All routes are mounted under
the "/etsy/oauth" prefix in the main application.
"""

from .oauth_routes import EtsyOAuthRoutes

__all__ = ['EtsyOAuthRoutes']
