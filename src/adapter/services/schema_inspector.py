import logging
from typing import Dict, Set

from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import AsyncEngine

from src.app.services.schema_capabilities import SchemaCapabilities

logger = logging.getLogger(__name__)


def _columns_by_table(sync_conn) -> Dict[str, Set[str]]:
    inspector = inspect(sync_conn)
    columns = {}
    for table in ("guest_invites", "guests"):
        if inspector.has_table(table):
            columns[table] = {col["name"] for col in inspector.get_columns(table)}
        else:
            columns[table] = set()
    return columns


async def detect_schema_capabilities(engine: AsyncEngine) -> SchemaCapabilities:
    """Inspect the persisted schema once and derive capability flags."""
    async with engine.connect() as conn:
        columns = await conn.run_sync(_columns_by_table)

    invite_columns = columns["guest_invites"]
    guest_columns = columns["guests"]
    capabilities = SchemaCapabilities(
        max_uses="max_uses" in invite_columns,
        uses_count="uses_count" in invite_columns,
        revoked_at="revoked_at" in invite_columns,
        revoked_reason="revoked_reason" in invite_columns,
        normalized_contacts={"normalized_email", "normalized_phone"} <= guest_columns,
    )
    logger.info(f"Schema capabilities detected: {capabilities}")
    return capabilities
