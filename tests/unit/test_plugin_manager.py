"""
Unit tests for plugin discovery and registration
"""

import pytest
from fastapi import APIRouter

from plugin_manager import PluginManager
from plugins import PluginType, get_all_authorization_plugins, get_all_route_plugins
from plugins.etsy.auth.oauth import EtsyOAuthAuthorizationPlugin
from plugins.etsy.config import EtsyStrategyOptions
from plugins.etsy.routes import EtsyOAuthRoutes

pytestmark = [pytest.mark.unit]


class TestPluginManager:
    """Test the PluginManager class"""

    def test_discover_plugins_registers_etsy(self):
        """Test that discovery registers the Etsy plugins"""
        manager = PluginManager()
        manager.discover_plugins()

        assert get_all_authorization_plugins()["etsy_oauth"] is EtsyOAuthAuthorizationPlugin
        assert get_all_route_plugins()["etsy/oauth"] is EtsyOAuthRoutes

    def test_create_authorization_plugin(self):
        """Test creating an authorization plugin with constructor arguments"""
        manager = PluginManager()
        manager.discover_plugins()
        options = EtsyStrategyOptions(consumer_key="key", consumer_secret="secret")

        plugin = manager.create_authorization_plugin("etsy_oauth", options=options)

        assert isinstance(plugin, EtsyOAuthAuthorizationPlugin)
        assert plugin.options is options

    def test_create_unknown_plugin(self):
        """Test that unknown service names return None"""
        manager = PluginManager()

        assert manager.create_authorization_plugin("unknown") is None
        assert manager.create_route_plugin("unknown") is None

    def test_get_service_routers(self):
        """Test that route plugins provide routers keyed by service name"""
        manager = PluginManager()
        manager.discover_plugins()

        routers = manager.get_service_routers()

        assert isinstance(routers["etsy/oauth"], APIRouter)
        paths = {route.path for route in routers["etsy/oauth"].routes}
        assert {"/login", "/callback"} <= paths

    def test_route_plugin_router(self):
        """Test that the route plugin exposes exactly the login and callback routes"""
        router = EtsyOAuthRoutes().get_router()

        assert sorted(route.path for route in router.routes) == ["/callback", "/login"]

    def test_plugin_metadata(self):
        """Test plugin metadata for introspection"""
        metadata = EtsyOAuthAuthorizationPlugin.get_metadata()

        assert metadata == {
            "plugin_type": PluginType.AUTHORIZATION,
            "service_name": "etsy_oauth",
            "class_name": "EtsyOAuthAuthorizationPlugin"
        }
