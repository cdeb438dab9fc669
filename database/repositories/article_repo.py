"""Article repository for CRUD operations on Articles collection."""
from typing import Optional, List, Dict, Any
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError
from database.repositories.base import write_operation
from shared.config import settings
from shared.utils import generate_article_id, get_utc_now


class ArticleRepository:
    """Repository for Article CRUD operations."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.collection = db.articles

    @write_operation("create article")
    async def create_article(
        self,
        slug: str,
        title: str,
        meta_description: Optional[str],
        content_html: str,
        tags: List[str],
        main_keyword: str,
        image_url: Optional[str] = None,
        image_alt: Optional[str] = None,
        keyword_id: Optional[str] = None
    ) -> Optional[Dict[str, Any]]:
        """Create a new article record. Returns None if the slug is already taken."""
        now = get_utc_now()

        article = {
            "_id": generate_article_id(),
            "slug": slug,
            "title": title,
            "meta_description": meta_description,
            "content_html": content_html,
            "previous_content_html": None,
            "tags": list(tags),
            "main_keyword": main_keyword,
            "image_url": image_url,
            "image_alt": image_alt,
            "keyword_id": keyword_id,
            "author": settings.default_author,
            "version": 1,
            "published_at": now,
            "created_at": now,
            "updated_at": now
        }

        try:
            await self.collection.insert_one(article)
        except DuplicateKeyError:
            return None
        return article

    async def get_article(self, article_id: str) -> Optional[Dict[str, Any]]:
        """Get an article by ID."""
        return await self.collection.find_one({"_id": article_id})

    async def get_article_by_slug(self, slug: str) -> Optional[Dict[str, Any]]:
        """Get an article by slug."""
        return await self.collection.find_one({"slug": slug})

    async def get_article_summary(self, article_id: str) -> Optional[Dict[str, Any]]:
        """Get the id, title and slug of an article."""
        return await self.collection.find_one(
            {"_id": article_id},
            {"_id": 1, "title": 1, "slug": 1}
        )

    async def slug_exists(self, slug: str) -> bool:
        """Check if an article with the given slug exists."""
        count = await self.collection.count_documents({"slug": slug})
        return count > 0

    @write_operation("update article content")
    async def update_content(
        self,
        article_id: str,
        expected_version: Optional[int],
        fields: Dict[str, Any]
    ) -> Optional[Dict[str, Any]]:
        """
        Atomically replace content fields if the article is still at expected_version.

        Articles written before versioning have no version field; pass None
        for those. Returns the updated article, or None when the version no
        longer matches.
        """
        if expected_version is None:
            version_filter = {"$exists": False}
        else:
            version_filter = expected_version

        return await self.collection.find_one_and_update(
            {"_id": article_id, "version": version_filter},
            {
                "$set": {**fields, "updated_at": get_utc_now()},
                "$inc": {"version": 1}
            },
            return_document=ReturnDocument.AFTER
        )
