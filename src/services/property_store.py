"""Record store used by the listing wizard to load and save properties."""

from typing import Optional, Protocol

from src.services import supabase_client
from src.utils.logging import get_structured_logger, log_timing

logger = get_structured_logger(__name__)


class RecordStore(Protocol):
    """Create, update and fetch property rows. Failures raise ``PersistenceError``."""

    async def create(self, record: dict) -> dict: ...

    async def update(self, record_id: str, record: dict) -> dict: ...

    async def fetch_by_id(self, record_id: str) -> Optional[dict]: ...


class SupabasePropertyStore:
    """RecordStore backed by the Supabase properties table."""

    async def create(self, record: dict) -> dict:
        with log_timing("property_create", logger=logger):
            row = await supabase_client.create_property(record)
        logger.info("Property created", property_id=row.get("id"))
        return row

    async def update(self, record_id: str, record: dict) -> dict:
        with log_timing("property_update", logger=logger, property_id=record_id):
            row = await supabase_client.update_property(record_id, record)
        logger.info("Property updated", property_id=record_id)
        return row

    async def fetch_by_id(self, record_id: str) -> Optional[dict]:
        with log_timing("property_fetch", logger=logger, property_id=record_id):
            return await supabase_client.get_property_by_id(record_id)
