# plugins/etsy/routes/oauth_routes.py
"""
Etsy OAuth Routes
=================

This module implements the HTTP routes that drive the Etsy OAuth 1.0a flow.

The EtsyOAuthRoutes class implements the RoutePlugin interface and provides
routes for:
- Initiating the Etsy OAuth flow
- Processing the callback Etsy redirects the user back to
"""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.responses import RedirectResponse

from config import get_settings
from plugins import RoutePlugin
from plugins.etsy.errors import AuthenticationFailed, AuthorizationDenied, EtsyOAuthError

logger = logging.getLogger(__name__)


def _safe_next_url(next_url: Optional[str]) -> Optional[str]:
    # Only same-site paths are allowed as post-login targets
    if next_url and next_url.startswith("/") and not next_url.startswith("//"):
        return next_url
    return None


def _get_etsy_oauth_plugin():
    from plugin_manager import plugin_manager

    etsy_oauth = plugin_manager.create_authorization_plugin("etsy_oauth")
    if not etsy_oauth:
        logger.error("Etsy OAuth plugin is not registered")
        raise HTTPException(
            status_code=500,
            detail="Etsy OAuth plugin not available"
        )
    return etsy_oauth


class EtsyOAuthRoutes(RoutePlugin):
    """
    Plugin for Etsy OAuth routes.

    The routes are mounted under the "/etsy/oauth" prefix in the application.

    Class Attributes:
        service_name (str): The unique identifier for this plugin
    """

    service_name = "etsy/oauth"

    def get_router(self) -> APIRouter:
        """
        Get the router for Etsy OAuth routes.

        Returns:
            APIRouter: FastAPI router with Etsy OAuth routes
        """
        router = APIRouter(tags=["etsy", "oauth"])

        @router.get("/login")
        async def etsy_oauth_login(
            request: Request,
            next: str = Query(None),
            callback_url: str = Query(None),
            force_login: bool = Query(False),
            screen_name: str = Query(None)
        ):
            """
            Initiate Etsy OAuth login.

            This endpoint obtains a request token and redirects the user to
            Etsy's sign-in page. The request token is kept in the session
            until the callback arrives.

            Args:
                request (Request): The HTTP request object
                next (str, optional): Path to redirect to after successful authentication
                callback_url (str, optional): Custom callback URL for the OAuth flow
                force_login (bool, optional): Make Etsy ask for credentials again
                screen_name (str, optional): Prefill Etsy's login form

            Returns:
                RedirectResponse: Redirect to Etsy's authorization page
            """
            etsy_oauth = _get_etsy_oauth_plugin()

            try:
                redirect_url, request_token = await etsy_oauth.get_authorization_url(
                    callback_url,
                    force_login="true" if force_login else None,
                    screen_name=screen_name
                )
            except EtsyOAuthError as e:
                logger.error(f"Error initiating Etsy OAuth login: {str(e)}")
                raise HTTPException(
                    status_code=502,
                    detail="Error initiating Etsy login"
                )

            request.session[etsy_oauth.session_key] = {
                "request_token": request_token,
                "next": _safe_next_url(next),
            }

            return RedirectResponse(redirect_url)

        @router.get("/callback")
        async def etsy_oauth_callback(request: Request):
            """
            Handle the Etsy OAuth callback.

            Etsy sends the user back here with ``oauth_token`` and
            ``oauth_verifier``, or with ``denied`` if the user declined.

            Returns:
                RedirectResponse: Redirect to the next URL on success, or to
                the login failure URL if the user denied access or was rejected
            """
            settings = get_settings()
            etsy_oauth = _get_etsy_oauth_plugin()

            state = request.session.pop(etsy_oauth.session_key, None) or {}

            try:
                result = await etsy_oauth.authenticate(request.query_params, state.get("request_token"))
            except (AuthorizationDenied, AuthenticationFailed) as e:
                logger.info(f"Etsy login failed: {str(e)}")
                return RedirectResponse(settings.LOGIN_FAILURE_URL, status_code=303)
            except EtsyOAuthError as e:
                logger.error(f"Error processing Etsy OAuth callback: {str(e)}")
                raise HTTPException(
                    status_code=502,
                    detail=f"Etsy OAuth error: {str(e)}"
                )

            profile = result.profile
            request.session["user"] = {
                "id": profile.id,
                "username": profile.username,
                "provider": profile.provider,
            }
            logger.info(f"Etsy user {profile.id} logged in")

            return RedirectResponse(state.get("next") or settings.LOGIN_SUCCESS_URL, status_code=303)

        return router
