# plugins/__init__.py
"""
Plugin System for the Etsy OAuth Proxy
======================================

This module provides the foundation for the plugin architecture of the proxy.
It defines the base interfaces that provider plugins implement and keeps the
registry the plugin manager reads from.

The plugin system supports two types of plugins:
1. Authorization Plugins: Delegate user login to an identity provider
2. Route Plugins: Expose HTTP endpoints that drive an authorization plugin

Plugin Lifecycle:
---------------
1. Plugin classes are defined in a package under 'plugins/'
2. The package registers its classes when it is imported
3. The plugin manager discovers and imports plugin packages at startup
4. Plugin instances are created per operation through the plugin manager

Adding a New Provider:
--------------------
1. Create a new directory under 'plugins/'
2. Implement an AuthorizationPlugin for the provider's login flow
3. Implement a RoutePlugin exposing the login and callback endpoints
4. Register both in the __init__.py of your plugin package
"""

from typing import Dict, Type, Optional, Any
import logging
from enum import Enum

logger = logging.getLogger(__name__)


class PluginType(str, Enum):
    """
    Enum defining the types of plugins supported by the system.

    Types:
        AUTHORIZATION: Plugins that authenticate users against a provider
        ROUTE: Plugins that provide HTTP endpoints
    """
    AUTHORIZATION = "authorization"
    ROUTE = "route"

class PluginBase:
    """
    Base class for all plugins.

    Class Attributes:
        plugin_type (PluginType): The type of plugin
        service_name (str): Unique identifier for the service this plugin supports
                           (e.g., "etsy_oauth")
    """

    plugin_type: PluginType
    service_name: str

    @classmethod
    def get_metadata(cls) -> Dict[str, Any]:
        """
        Return metadata about the plugin for discovery and introspection.

        Returns:
            Dict[str, Any]: Dictionary containing plugin_type, service_name
                            and class_name
        """
        return {
            "plugin_type": cls.plugin_type,
            "service_name": cls.service_name,
            "class_name": cls.__name__
        }

class AuthorizationPlugin(PluginBase):
    """
    Base class for authorization plugins that delegate login to a provider.

    Authorization plugins are responsible for:
    - Running the provider's login flow
    - Turning the provider's user record into a profile

    Class Attributes:
        plugin_type (PluginType): Set to AUTHORIZATION for all auth plugins
    """

    plugin_type = PluginType.AUTHORIZATION

class RoutePlugin(PluginBase):
    """
    Base class for plugins that provide their own routes.

    The routes provided by a plugin are mounted under the service name,
    e.g., "/[service]/..." to create appropriate namespacing.

    Class Attributes:
        plugin_type (PluginType): Set to ROUTE for all route plugins
    """

    plugin_type = PluginType.ROUTE

    def get_router(self):
        """
        Get the router for this plugin's routes.

        Returns:
            fastapi.APIRouter: The router with all plugin-specific routes

        Raises:
            NotImplementedError: If the subclass doesn't implement this method
        """
        raise NotImplementedError("Subclasses must implement get_router")

# Plugin registry
_authorization_plugins: Dict[str, Type[AuthorizationPlugin]] = {}
_route_plugins: Dict[str, Type[RoutePlugin]] = {}

def register_authorization_plugin(plugin_class: Type[AuthorizationPlugin]) -> None:
    """
    Register an authorization plugin with the system.

    Each plugin is registered under its service_name, which must be unique
    across all authorization plugins.

    Args:
        plugin_class (Type[AuthorizationPlugin]): The authorization plugin class to register

    Example:
        >>> class MyAuthPlugin(AuthorizationPlugin):
        ...     service_name = "my_service"
        >>> register_authorization_plugin(MyAuthPlugin)
    """
    _authorization_plugins[plugin_class.service_name] = plugin_class
    logger.info(f"Registered authorization plugin: {plugin_class.service_name}")

def register_route_plugin(plugin_class: Type[RoutePlugin]) -> None:
    """
    Register a route plugin with the system.

    Args:
        plugin_class (Type[RoutePlugin]): The route plugin class to register
    """
    _route_plugins[plugin_class.service_name] = plugin_class
    logger.info(f"Registered route plugin: {plugin_class.service_name}")

def get_authorization_plugin(service_name: str) -> Optional[Type[AuthorizationPlugin]]:
    """
    Get an authorization plugin class by its service name.

    Returns None if no plugin with the given service name is registered.

    Example:
        >>> etsy_auth_plugin = get_authorization_plugin("etsy_oauth")
        >>> if etsy_auth_plugin:
        ...     plugin_instance = etsy_auth_plugin()
    """
    return _authorization_plugins.get(service_name)

def get_route_plugin(service_name: str) -> Optional[Type[RoutePlugin]]:
    """Get a route plugin class by its service name, or None."""
    return _route_plugins.get(service_name)

def get_all_authorization_plugins() -> Dict[str, Type[AuthorizationPlugin]]:
    """
    Get all registered authorization plugins.

    The dictionary is a copy of the internal registry, so modifying it will
    not affect the registry.
    """
    return _authorization_plugins.copy()

def get_all_route_plugins() -> Dict[str, Type[RoutePlugin]]:
    """
    Get all registered route plugins.

    The dictionary is a copy of the internal registry, so modifying it will
    not affect the registry.
    """
    return _route_plugins.copy()
