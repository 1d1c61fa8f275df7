"""Supabase client wrapper with async context manager support."""

import os
from typing import Optional
from supabase import create_client, Client
from supabase.client import ClientOptions
from src.utils.errors import SupabaseError
from src.utils.wizard_config import WizardConfig
import logging

logger = logging.getLogger(__name__)

# Global client instance (singleton pattern)
_client: Optional[Client] = None


def get_supabase_client() -> Client:
    """Get or create Supabase client singleton."""
    global _client
    
    if _client is None:
        url = os.environ.get("SUPABASE_URL")
        key = os.environ.get("SUPABASE_SERVICE_ROLE_KEY")
        
        if not url or not key:
            raise SupabaseError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set")
        
        options = ClientOptions(
            auto_refresh_token=False,
            persist_session=False,
        )
        
        _client = create_client(url, key, options)
        logger.info("Supabase client initialized", extra={"url": url})
    
    return _client


class SupabaseClient:
    """Async context manager for Supabase client."""
    
    def __init__(self):
        self.client: Optional[Client] = None
    
    async def __aenter__(self) -> Client:
        """Enter async context."""
        self.client = get_supabase_client()
        return self.client
    
    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Exit async context."""
        if exc_type:
            logger.error(
                "Supabase operation error",
                extra={"error": str(exc_val), "type": exc_type.__name__}
            )
        return False


# Properties table operations
async def create_property(property_data: dict) -> dict:
    """Create a new property listing."""
    async with SupabaseClient() as client:
        try:
            result = client.table(WizardConfig.PROPERTIES_TABLE).insert(property_data).execute()
        except Exception as e:
            raise SupabaseError(f"Failed to create property: {e}")
        if result.data and len(result.data) > 0:
            return result.data[0]
        raise SupabaseError("Failed to create property: no data returned")


async def get_property_by_id(property_id: str) -> Optional[dict]:
    """Get a property by ID, ignoring soft-deleted rows."""
    async with SupabaseClient() as client:
        try:
            result = (
                client.table(WizardConfig.PROPERTIES_TABLE)
                .select("*")
                .eq("id", property_id)
                .is_("deleted_at", "null")
                .execute()
            )
        except Exception as e:
            raise SupabaseError(f"Failed to get property: {e}")
        return result.data[0] if result.data and len(result.data) > 0 else None


async def update_property(property_id: str, updates: dict) -> dict:
    """Update a property listing."""
    async with SupabaseClient() as client:
        try:
            result = (
                client.table(WizardConfig.PROPERTIES_TABLE)
                .update(updates)
                .eq("id", property_id)
                .execute()
            )
        except Exception as e:
            raise SupabaseError(f"Failed to update property: {e}")
        if result.data and len(result.data) > 0:
            return result.data[0]
        raise SupabaseError(f"Failed to update property: {property_id}")
