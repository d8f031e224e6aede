"""
Shared pytest fixtures and configuration
"""

import json
import os
import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Add the project root to Python path to make imports work
sys.path.insert(0, str(Path(__file__).parent.parent))

# Set test environment variables
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["ETSY_CONSUMER_KEY"] = "test_consumer_key"
os.environ["ETSY_CONSUMER_SECRET"] = "test_consumer_secret"
os.environ["ETSY_OAUTH_CALLBACK_URL"] = "http://testserver/etsy/oauth/callback"

from plugins.etsy.auth.client import OAuth1Client
from plugins.etsy.auth.oauth import EtsyOAuthAuthorizationPlugin
from plugins.etsy.config import EtsyStrategyOptions


PROFILE_DOCUMENT = {
    "count": 1,
    "results": [
        {
            "user_id": "42",
            "login_name": "bob",
            "primary_email": "bob@x.com",
            "creation_tsz": 1413324188,
            "referred_by_user_id": None,
            "awaiting_feedback_count": 0
        }
    ],
    "params": {"user_id": "__SELF__"},
    "type": "User",
    "pagination": {}
}


@pytest.fixture
def profile_document():
    """A successful Etsy users response, decoded."""
    return json.loads(json.dumps(PROFILE_DOCUMENT))


@pytest.fixture
def profile_body():
    """A successful Etsy users response body."""
    return json.dumps(PROFILE_DOCUMENT)


@pytest.fixture
def etsy_options():
    """Strategy options with explicit test credentials."""
    return EtsyStrategyOptions(
        consumer_key="test_consumer_key",
        consumer_secret="test_consumer_secret",
        callback_url="http://testserver/etsy/oauth/callback"
    )


@pytest.fixture
def mock_oauth_client(profile_body):
    """
    An OAuth1Client stand-in that answers like Etsy for a user with id 42.
    """
    client = MagicMock(spec=OAuth1Client)
    client.get_request_token.return_value = {
        "oauth_token": "request-token",
        "oauth_token_secret": "request-secret",
        "oauth_callback_confirmed": "true"
    }
    client.build_authorize_url.return_value = "https://www.etsy.com/oauth/signin?oauth_token=request-token"
    client.get_access_token.return_value = {
        "oauth_token": "access-token",
        "oauth_token_secret": "access-secret",
        "user_id": "42"
    }
    client.get.return_value = profile_body
    return client


@pytest.fixture
def etsy_oauth_plugin(etsy_options, mock_oauth_client):
    """An Etsy OAuth plugin wired to the mock OAuth client."""
    return EtsyOAuthAuthorizationPlugin(etsy_options, client=mock_oauth_client)


@pytest.fixture
def app():
    """
    The FastAPI application with all plugins mounted.
    """
    from main import app as main_app
    return main_app


@pytest.fixture
def client(app):
    """
    A test client that does not follow redirects, so OAuth redirects can be inspected.
    """
    from fastapi.testclient import TestClient
    return TestClient(app, follow_redirects=False)


@pytest.fixture
def mock_etsy_oauth_plugin(monkeypatch, etsy_oauth_plugin):
    """
    Make the plugin manager hand out the Etsy plugin wired to the mock OAuth client.
    """
    from plugin_manager import plugin_manager

    original_create_auth_plugin = plugin_manager.create_authorization_plugin

    def mock_create_authorization_plugin(service_name, **kwargs):
        if service_name == "etsy_oauth":
            return etsy_oauth_plugin
        return original_create_auth_plugin(service_name, **kwargs)

    monkeypatch.setattr(plugin_manager, "create_authorization_plugin", mock_create_authorization_plugin)

    return etsy_oauth_plugin
