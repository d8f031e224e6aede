# plugin_manager.py
"""
Plugin Manager for the Etsy OAuth Proxy
=======================================

This module provides utilities for discovering, loading, and instantiating
plugins. The PluginManager class is a facade over the registry in the
``plugins`` package.

Usage:
------
The plugin_manager is instantiated as a singleton at the module level and should be
imported and used directly by application code:

    from plugin_manager import plugin_manager

    # Discover available plugins
    plugin_manager.discover_plugins()

    # Get a plugin by name
    etsy_oauth = plugin_manager.create_authorization_plugin("etsy_oauth")

    # Mount every plugin router
    for service_name, router in plugin_manager.get_service_routers().items():
        app.include_router(router, prefix=f"/{service_name}")
"""

import importlib
import logging
import os
from typing import Dict, Type, Optional

from fastapi import APIRouter

from plugins import (
    AuthorizationPlugin,
    RoutePlugin,
    get_all_authorization_plugins,
    get_all_route_plugins,
    get_authorization_plugin,
    get_route_plugin
)

logger = logging.getLogger(__name__)

class PluginManager:
    """
    Manager for proxy plugins.

    The PluginManager is responsible for:
    - Discovering plugin packages in the plugins directory
    - Creating plugin instances
    - Collecting the routers that route plugins provide
    """

    def __init__(self):
        """
        Initialize the plugin manager.

        Plugins are not loaded during initialization; discover_plugins must be
        called to import plugin packages.
        """
        self._plugin_dir = os.path.join(os.path.dirname(__file__), "plugins")
        self._loaded_plugins = set()

    def discover_plugins(self):
        """
        Discover plugins in the plugins directory.

        Each subdirectory of the plugins directory is imported once. Importing
        a plugin package registers its plugins with the registry. Packages that
        fail to import are logged and skipped.
        """
        for item in sorted(os.listdir(self._plugin_dir)):
            if os.path.isdir(os.path.join(self._plugin_dir, item)) and not item.startswith('__'):
                module_name = f"plugins.{item}"
                if module_name not in self._loaded_plugins:
                    try:
                        importlib.import_module(module_name)
                        self._loaded_plugins.add(module_name)
                        logger.info(f"Discovered plugin: {module_name}")
                    except ImportError as e:
                        logger.error(f"Error loading plugin {module_name}: {e}")

    def get_authorization_plugin(self, service_name: str) -> Optional[Type[AuthorizationPlugin]]:
        """Get an authorization plugin class by service name, or None."""
        return get_authorization_plugin(service_name)

    def get_all_authorization_plugins(self) -> Dict[str, Type[AuthorizationPlugin]]:
        """Get all registered authorization plugins."""
        return get_all_authorization_plugins()

    def create_authorization_plugin(self, service_name: str, **kwargs) -> Optional[AuthorizationPlugin]:
        """
        Create an instance of an authorization plugin.

        Additional keyword arguments are passed to the plugin's constructor.

        Args:
            service_name (str): The unique service name of the plugin to instantiate
            **kwargs: Additional keyword arguments to pass to the plugin constructor

        Returns:
            Optional[AuthorizationPlugin]: A plugin instance if the plugin was found,
                                          None otherwise

        Example:
            >>> etsy_oauth = plugin_manager.create_authorization_plugin("etsy_oauth")
            >>> if etsy_oauth:
            ...     url, request_token = await etsy_oauth.get_authorization_url()
        """
        plugin_class = self.get_authorization_plugin(service_name)
        if plugin_class:
            return plugin_class(**kwargs)
        return None

    def get_all_route_plugins(self) -> Dict[str, Type[RoutePlugin]]:
        """Get all registered route plugins."""
        return get_all_route_plugins()

    def create_route_plugin(self, service_name: str, **kwargs) -> Optional[RoutePlugin]:
        """Create an instance of a route plugin, or return None if it is not registered."""
        plugin_class = get_route_plugin(service_name)
        if plugin_class:
            return plugin_class(**kwargs)
        return None

    def get_service_routers(self) -> Dict[str, APIRouter]:
        """
        Get all routers from registered route plugins.

        Returns:
            Dict[str, APIRouter]: Dictionary mapping service names to their routers

        Example:
            >>> routers = plugin_manager.get_service_routers()
            >>> for service_name, router in routers.items():
            ...     app.include_router(router, prefix=f"/{service_name}")
        """
        routers = {}

        for service_name, plugin_class in self.get_all_route_plugins().items():
            plugin = plugin_class()
            routers[service_name] = plugin.get_router()
            logger.info(f"Found route plugin: {service_name}")

        return routers

# Create a singleton instance of the plugin manager
plugin_manager = PluginManager()
