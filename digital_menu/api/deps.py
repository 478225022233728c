"""Dependencies resolving application-scoped services from ``app.state``"""

from fastapi import Request

from digital_menu.config import Settings
from digital_menu.runtime import Runtime
from digital_menu.services.auth_service import AuthStateFeed
from digital_menu.state.menu_store import MenuStore


def get_runtime(request: Request) -> Runtime:
    return request.app.state.runtime


def get_menu_store(request: Request) -> MenuStore:
    return get_runtime(request).menu_store


def get_auth_events(request: Request) -> AuthStateFeed:
    return get_runtime(request).auth_events


def get_app_settings(request: Request) -> Settings:
    return get_runtime(request).settings
