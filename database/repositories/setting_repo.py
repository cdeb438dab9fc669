"""Setting repository for key/value settings."""
import json
import logging
from typing import Optional, Dict, Any
from motor.motor_asyncio import AsyncIOMotorDatabase
from database.repositories.base import write_operation
from shared.utils import get_utc_now

logger = logging.getLogger(__name__)


class SettingKey:
    """Known setting keys."""
    PRODUCT_KNOWLEDGE = "productKnowledge"
    ENABLE_PRODUCT_KNOWLEDGE = "enableProductKnowledge"
    AI_PROVIDER = "aiProvider"


class SettingRepository:
    """Repository for Setting reads and upserts."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.collection = db.settings

    async def get_setting(self, key: str) -> Optional[Dict[str, Any]]:
        """Get a setting document by key."""
        return await self.collection.find_one({"_id": key})

    async def get_value(self, key: str) -> Optional[str]:
        """Get a setting value by key."""
        setting = await self.get_setting(key)
        return setting["value"] if setting else None

    @write_operation("save setting")
    async def set_value(self, key: str, value: str) -> Dict[str, Any]:
        """Insert or update a setting."""
        setting = {"_id": key, "value": value, "updated_at": get_utc_now()}
        await self.collection.update_one(
            {"_id": key},
            {"$set": {"value": value, "updated_at": setting["updated_at"]}},
            upsert=True
        )
        return setting

    async def get_product_knowledge(self) -> str:
        """Product knowledge text, or an empty string when missing or disabled."""
        enabled = await self.get_value(SettingKey.ENABLE_PRODUCT_KNOWLEDGE)
        if enabled == "disabled":
            return ""
        return await self.get_value(SettingKey.PRODUCT_KNOWLEDGE) or ""

    async def get_ai_provider(self, default: str) -> str:
        """
        Resolve the configured AI provider name.

        Accepts a bare string, a JSON-encoded string, or the older
        ``{"provider": ...}`` object shape.
        """
        raw = await self.get_value(SettingKey.AI_PROVIDER)
        if not raw:
            return default

        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError:
            return raw.strip() or default

        if isinstance(parsed, str):
            return parsed or default
        if isinstance(parsed, dict):
            return parsed.get("provider") or default

        logger.warning(f"Unrecognised aiProvider setting {raw!r}, using {default}")
        return default
