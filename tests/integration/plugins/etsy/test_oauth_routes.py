"""
Integration tests for Etsy OAuth authentication routes
"""

import pytest

from plugins.etsy.errors import InternalOAuthError

pytestmark = [pytest.mark.integration, pytest.mark.oauth_auth]


class TestEtsyOAuthRoutes:
    """Test the Etsy OAuth authentication routes"""

    def test_oauth_login_route(self, client, mock_etsy_oauth_plugin, mock_oauth_client):
        """Test the OAuth login route"""
        response = client.get("/etsy/oauth/login", params={"next": "/shop"})

        # Should redirect to Etsy
        assert response.status_code == 307
        assert response.headers["location"] == "https://www.etsy.com/oauth/signin?oauth_token=request-token"

        # The session should be set
        assert client.cookies.get("etsy_oauth_session") is not None
        mock_oauth_client.get_request_token.assert_called_once()

    def test_oauth_login_route_with_authorization_params(self, client, mock_etsy_oauth_plugin, mock_oauth_client):
        """Test that force_login and screen_name reach the authorization URL"""
        client.get("/etsy/oauth/login", params={"force_login": "true", "screen_name": "bob"})

        _, kwargs = mock_oauth_client.build_authorize_url.call_args
        assert kwargs == {"force_login": "true", "screen_name": "bob"}

    def test_oauth_login_route_provider_error(self, client, mock_etsy_oauth_plugin, mock_oauth_client):
        """Test that a failing request token call is reported as a bad gateway"""
        mock_oauth_client.get_request_token.side_effect = InternalOAuthError("Failed to obtain request token")

        response = client.get("/etsy/oauth/login")

        assert response.status_code == 502

    def test_oauth_callback_route(self, client, mock_etsy_oauth_plugin, mock_oauth_client):
        """Test a full login through login and callback"""
        client.get("/etsy/oauth/login", params={"next": "/shop"})

        response = client.get(
            "/etsy/oauth/callback",
            params={"oauth_token": "request-token", "oauth_verifier": "verifier"}
        )

        assert response.status_code == 303
        assert response.headers["location"] == "/shop"
        mock_oauth_client.get_access_token.assert_called_once_with(
            {
                "oauth_token": "request-token",
                "oauth_token_secret": "request-secret",
                "oauth_callback_confirmed": "true"
            },
            "verifier"
        )

        # The user is now logged in
        home = client.get("/")
        assert home.json()["user"] == {"id": "42", "username": "bob", "provider": "etsy"}

    def test_oauth_callback_route_default_next(self, client, mock_etsy_oauth_plugin):
        """Test that an external next URL is ignored"""
        client.get("/etsy/oauth/login", params={"next": "https://evil.example.com"})

        response = client.get(
            "/etsy/oauth/callback",
            params={"oauth_token": "request-token", "oauth_verifier": "verifier"}
        )

        assert response.status_code == 303
        assert response.headers["location"] == "/"

    def test_oauth_callback_route_denied(self, client, mock_etsy_oauth_plugin, mock_oauth_client):
        """Test that a denied authorization redirects to the failure URL"""
        client.get("/etsy/oauth/login")

        response = client.get("/etsy/oauth/callback", params={"denied": "request-token"})

        assert response.status_code == 303
        assert response.headers["location"] == "/?error=login_failed"
        mock_oauth_client.get_access_token.assert_not_called()
        mock_oauth_client.get.assert_not_called()
        assert client.get("/").json()["user"] is None

    def test_oauth_callback_route_without_session(self, client, mock_etsy_oauth_plugin, mock_oauth_client):
        """Test that a callback without a started login fails"""
        response = client.get(
            "/etsy/oauth/callback",
            params={"oauth_token": "request-token", "oauth_verifier": "verifier"}
        )

        assert response.status_code == 303
        assert response.headers["location"] == "/?error=login_failed"
        mock_oauth_client.get_access_token.assert_not_called()

    def test_oauth_callback_route_api_error(self, client, mock_etsy_oauth_plugin, mock_oauth_client):
        """Test that an Etsy API error is reported as a bad gateway"""
        mock_oauth_client.get.side_effect = InternalOAuthError(
            "Request failed",
            data='{"errors": [{"message": "Invalid user", "code": 404}]}',
            status_code=404
        )
        client.get("/etsy/oauth/login")

        response = client.get(
            "/etsy/oauth/callback",
            params={"oauth_token": "request-token", "oauth_verifier": "verifier"}
        )

        assert response.status_code == 502
        assert "Invalid user" in response.json()["detail"]

    def test_logout(self, client, mock_etsy_oauth_plugin):
        """Test that logout clears the logged in user"""
        client.get("/etsy/oauth/login")
        client.get(
            "/etsy/oauth/callback",
            params={"oauth_token": "request-token", "oauth_verifier": "verifier"}
        )

        client.get("/logout")

        assert client.get("/").json()["user"] is None
