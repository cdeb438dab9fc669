"""Keyword repository for the Keywords collection."""
from motor.motor_asyncio import AsyncIOMotorDatabase
from database.repositories.base import write_operation


class KeywordStatus:
    """Keyword status constants."""
    NEW = "new"
    DRAFT = "draft"
    PUBLISHED = "published"


class KeywordRepository:
    """Repository for Keyword status updates made by generation jobs."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.collection = db.keywords

    @write_operation("publish keyword")
    async def mark_published(self, keyword_id: str) -> bool:
        """Mark a keyword as published."""
        result = await self.collection.update_one(
            {"_id": keyword_id},
            {"$set": {"status": KeywordStatus.PUBLISHED}}
        )
        return result.modified_count > 0
