"""
Configuration module.

Exports:
    settings: Application settings instance
    get_settings: Function to get settings (for dependency injection)
    Backends: Container of explicitly built backend clients
    build_backends: Build all backend clients from settings
    check_connection: Health check function
"""

from config.settings import settings, get_settings, Settings
from config.database import (
    Backends,
    build_backends,
    create_supabase_client,
    create_admin_client,
    create_legacy_backend,
    check_connection,
)

__all__ = [
    # Settings
    "settings",
    "get_settings",
    "Settings",

    # Backends
    "Backends",
    "build_backends",
    "create_supabase_client",
    "create_admin_client",
    "create_legacy_backend",
    "check_connection",
]
