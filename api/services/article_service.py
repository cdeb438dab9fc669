"""Article service: reads and one-level undo of regenerated content."""
import logging
from typing import Dict, Any, Tuple
from motor.motor_asyncio import AsyncIOMotorDatabase

from database.repositories.article_repo import ArticleRepository
from shared.exceptions import NoOpError, NotFoundError, ValidationError, VersionConflictError
from shared.snapshots import ContentSnapshot, decode_previous, encode_snapshot

logger = logging.getLogger(__name__)


class RestoreScope:
    """What an undo restored."""
    ALL = "all"
    CONTENT = "content"


UNDO_MESSAGES = {
    RestoreScope.ALL: "All fields restored to previous version",
    RestoreScope.CONTENT: "Content restored to previous version (legacy format, content only)",
}


class ArticleService:
    """Service for article reads and undo."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.article_repo = ArticleRepository(db)

    async def get_article(self, slug: str) -> Dict[str, Any]:
        """Get an article by slug."""
        article = await self.article_repo.get_article_by_slug(slug)
        if not article:
            raise NotFoundError("Article not found")
        return article

    async def undo_article(self, slug: str) -> Tuple[Dict[str, Any], str]:
        """
        Swap an article's current content with its stored previous version.

        Structured snapshots restore title, meta description, tags and content,
        and store what was current as the new snapshot. Legacy snapshots (bare
        HTML) only swap the content. Applying undo twice restores the original
        state.

        Returns the updated article and which scope was restored.
        """
        article = await self.get_article(slug)

        previous_raw = article.get("previous_content_html")
        if not previous_raw:
            raise ValidationError("No previous version available to undo")

        previous = decode_previous(previous_raw)
        current = ContentSnapshot.from_article(article)

        if isinstance(previous, ContentSnapshot):
            scope = RestoreScope.ALL
            fields = {
                **previous.to_fields(),
                "previous_content_html": encode_snapshot(current)
            }
        else:
            if previous == current.content_html:
                raise NoOpError("Previous version is identical to current content")
            scope = RestoreScope.CONTENT
            fields = {
                "content_html": previous,
                "previous_content_html": current.content_html
            }

        updated = await self.article_repo.update_content(
            article["_id"], article.get("version"), fields
        )
        if not updated:
            raise VersionConflictError(f"Article {slug} was modified concurrently, try again")

        logger.info(f"Undo applied to article {slug} ({scope})")
        return updated, scope
