"""
Backend connection management.

Builds the destination (Supabase), legacy (Firebase or retired) and
local-cache clients once at startup. The application lifespan owns the
resulting Backends container; orchestrators receive clients explicitly.
"""

from dataclasses import dataclass
from typing import Optional
import structlog
from supabase import create_client, Client

from config.settings import Settings
from exceptions import ExternalServiceError, UnknownBackendError
from integrations.base import BackendClient
from integrations.supabase_backend import SupabaseBackend
from integrations.firebase_backend import FirebaseBackend
from integrations.retired_backend import RetiredBackend
from integrations.local_cache import LocalCache

logger = structlog.get_logger(__name__)


@dataclass
class Backends:
    """Explicitly constructed backend clients."""
    destination: SupabaseBackend
    admin: Optional[SupabaseBackend]
    legacy: BackendClient
    local_cache: LocalCache

    def by_name(self, name: str) -> BackendClient:
        """Resolve a backend by its API name (destination or legacy)."""
        if name == "destination":
            return self.destination
        if name == "legacy":
            return self.legacy
        raise UnknownBackendError(name)


def create_supabase_client(settings: Settings) -> Client:
    """
    Create a Supabase client with the anon/public key.

    Raises:
        ExternalServiceError: If the client cannot be created
    """
    try:
        logger.info(
            "connecting_to_supabase",
            url=settings.supabase_url[:30] + "..."  # Log partial URL only
        )
        return create_client(settings.supabase_url, settings.supabase_key)

    except Exception as e:
        logger.error(
            "supabase_client_failed",
            error=str(e),
            error_type=type(e).__name__
        )
        raise ExternalServiceError(
            service="supabase",
            message=f"Failed to create Supabase client: {e}"
        ) from e


def create_admin_client(settings: Settings) -> Optional[Client]:
    """
    Create a Supabase client with the service role key (admin access).

    Only available if SUPABASE_SERVICE_KEY is configured.
    Reset operations require it.

    Returns:
        Client: Admin Supabase client, or None if not configured
    """
    if not settings.supabase_service_key:
        logger.warning("admin_client_not_configured")
        return None

    try:
        return create_client(
            settings.supabase_url,
            settings.supabase_service_key
        )
    except Exception as e:
        logger.error(
            "admin_client_failed",
            error=str(e)
        )
        return None


def create_legacy_backend(settings: Settings) -> BackendClient:
    """Select the legacy store variant from configuration."""
    if settings.legacy_backend == "firebase":
        logger.info(
            "legacy_backend_selected",
            backend="firebase",
            project_id=settings.firebase_project_id
        )
        try:
            return FirebaseBackend.from_settings(settings)
        except ExternalServiceError as e:
            logger.error("legacy_backend_unavailable", error=e.message)
            return RetiredBackend(reason=e.message)

    logger.info("legacy_backend_selected", backend="retired")
    return RetiredBackend()


def build_backends(settings: Settings) -> Backends:
    """
    Build every backend client used by the admin operations.

    Called once from the application lifespan.
    """
    destination = SupabaseBackend(
        create_supabase_client(settings),
        probe_table=settings.supabase_probe_table,
        reset_sentinel_id=settings.reset_sentinel_id,
    )

    admin_client = create_admin_client(settings)
    admin = None
    if admin_client is not None:
        admin = SupabaseBackend(
            admin_client,
            probe_table=settings.supabase_probe_table,
            reset_sentinel_id=settings.reset_sentinel_id,
        )

    return Backends(
        destination=destination,
        admin=admin,
        legacy=create_legacy_backend(settings),
        local_cache=LocalCache(
            settings.local_cache_path,
            products_key=settings.local_cache_products_key,
            deliveries_key=settings.local_cache_deliveries_key,
        ),
    )


# ===================
# HELPER FUNCTIONS
# ===================

def check_connection(backends: Backends) -> dict:
    """
    Check destination connection health.

    Returns:
        dict: Connection status with details
    """
    status = backends.destination.check_connection()

    if status.connected:
        return {
            "status": "healthy",
            "probe_table": backends.destination.probe_table,
            "timestamp": status.details.timestamp,
        }

    return {
        "status": "unhealthy",
        "error": status.details.error,
    }
