"""Configuration package for the session trainer."""
from .backend import BackendRoute, load_route, route_from_settings
from .registry import CLIENT_KEY, bind_model, get_model, unbind_model
from .settings import Settings, settings

__all__ = [
    "BackendRoute",
    "load_route",
    "route_from_settings",
    "CLIENT_KEY",
    "bind_model",
    "get_model",
    "unbind_model",
    "Settings",
    "settings",
]
