"""Executor that runs a single generation or regeneration job."""
import logging
from typing import Optional, Dict, Any
from motor.motor_asyncio import AsyncIOMotorDatabase

from database.repositories.job_repo import JobRepository, JobStatus, JobType
from database.repositories.article_repo import ArticleRepository
from database.repositories.keyword_repo import KeywordRepository
from database.repositories.setting_repo import SettingRepository
from generator.provider import ArticleGenerator, GeneratedArticle
from shared.config import settings
from shared.exceptions import NotFoundError, PersistenceError, VersionConflictError
from shared.snapshots import ContentSnapshot, encode_snapshot
from shared.utils import disambiguate_slug, placeholder_image_url, slugify

logger = logging.getLogger(__name__)

# Attempts to insert a generated article before giving up on slug collisions
MAX_SLUG_ATTEMPTS = 3


class JobExecutor:
    """
    Runs one job from pending to a terminal state.

    ``run`` never raises: anything that goes wrong after the job has moved to
    processing is recorded on the job as ``failed`` with the error message.
    """

    def __init__(
        self,
        db: AsyncIOMotorDatabase,
        publisher=None,
        generator: Optional[ArticleGenerator] = None
    ):
        self.db = db
        self.publisher = publisher
        self.job_repo = JobRepository(db)
        self.article_repo = ArticleRepository(db)
        self.keyword_repo = KeywordRepository(db)
        self.setting_repo = SettingRepository(db)
        self.generator = generator or ArticleGenerator()

    async def run(self, job_id: str):
        """Execute a job. Safe to launch as a detached task."""
        try:
            started = await self._start(job_id)
        except Exception as e:
            logger.error(f"Job {job_id} could not be started: {e}", exc_info=True)
            return

        if not started:
            return

        try:
            article_id = await self._execute(job_id)
            completed = await self.job_repo.complete_job(job_id, article_id)
        except Exception as e:
            await self._fail(job_id, e)
            return

        if completed:
            await self._publish(job_id, JobStatus.COMPLETED, article_id=article_id)
        else:
            logger.warning(f"Job {job_id} left processing before completion could be recorded")

    async def _start(self, job_id: str) -> bool:
        """Move the job to processing, unless it was cancelled or removed."""
        job = await self.job_repo.get_job(job_id)
        if not job or job["status"] == JobStatus.CANCELLED:
            logger.info(f"Job {job_id} was cancelled, skipping.")
            return False

        if job["status"] != JobStatus.PENDING:
            logger.warning(f"Job {job_id} is {job['status']}, not starting it again")
            return False

        if not await self.job_repo.start_processing(job_id):
            # A cancellation landed between the read and the conditional write
            logger.info(f"Job {job_id} was cancelled before processing started, skipping.")
            return False

        await self._publish(job_id, JobStatus.PROCESSING)
        return True

    async def _execute(self, job_id: str) -> str:
        """Generate content and write the article. Returns the article ID."""
        job = await self.job_repo.get_job(job_id)
        if not job:
            raise NotFoundError(f"Job {job_id} not found")

        product_knowledge = await self._load_product_knowledge()
        provider = self.generator.resolve_provider(
            await self.setting_repo.get_ai_provider(settings.default_ai_provider)
        )
        await self.job_repo.set_ai_provider(job_id, provider)

        generated = await self.generator.generate_article(
            job["keyword"],
            job["intent"],
            job.get("custom_prompt") or "",
            product_knowledge,
            bool(job.get("use_custom_only")),
            provider=provider
        )

        if job["job_type"] == JobType.REGENERATE and job.get("article_slug"):
            return await self._regenerate(job, generated)
        return await self._generate(job, generated)

    async def _load_product_knowledge(self) -> str:
        try:
            return await self.setting_repo.get_product_knowledge()
        except Exception as e:
            logger.warning(f"Error fetching product knowledge, continuing without it: {e}")
            return ""

    async def _regenerate(self, job: Dict[str, Any], generated: GeneratedArticle) -> str:
        """Overwrite an existing article, keeping the old content as an undo snapshot."""
        article = await self.article_repo.get_article_by_slug(job["article_slug"])
        if not article:
            raise NotFoundError("Article not found for regeneration")

        snapshot = ContentSnapshot.from_article(article)
        updated = await self.article_repo.update_content(
            article["_id"],
            article.get("version"),
            {
                "previous_content_html": encode_snapshot(snapshot),
                "content_html": generated.content_html,
                "title": generated.title,
                "meta_description": generated.meta_description,
                "tags": generated.tags
            }
        )
        if not updated:
            raise VersionConflictError(
                f"Article {job['article_slug']} was modified while it was being regenerated"
            )

        logger.info(f"Regenerate job {job['_id']} completed, article updated: {job['article_slug']}")
        return article["_id"]

    async def _generate(self, job: Dict[str, Any], generated: GeneratedArticle) -> str:
        """Create a new article for the job's keyword."""
        base_slug = slugify(job["keyword"]) or "article"
        slug = base_slug
        if await self.article_repo.slug_exists(slug):
            slug = disambiguate_slug(base_slug)

        article = None
        for _ in range(MAX_SLUG_ATTEMPTS):
            article = await self.article_repo.create_article(
                slug=slug,
                title=generated.title,
                meta_description=generated.meta_description,
                content_html=generated.content_html,
                tags=generated.tags,
                main_keyword=job["keyword"],
                image_url=placeholder_image_url(settings.placeholder_image_base, slug),
                image_alt=f"Ilustrasi {generated.title}",
                keyword_id=job.get("keyword_id")
            )
            if article:
                break
            # Another job took the slug between the check and the insert
            slug = disambiguate_slug(base_slug)

        if not article:
            raise PersistenceError(f"Could not find a free slug for keyword {job['keyword']!r}")

        if job.get("keyword_id"):
            await self.keyword_repo.mark_published(job["keyword_id"])

        logger.info(f"Generate job {job['_id']} completed, article created: {article['slug']}")
        return article["_id"]

    async def _fail(self, job_id: str, error: Exception):
        logger.error(f"Job {job_id} failed: {error}")
        message = str(error) or type(error).__name__
        try:
            if await self.job_repo.fail_job(job_id, message):
                await self._publish(job_id, JobStatus.FAILED, error=message)
        except Exception as e:
            logger.error(f"Could not record failure of job {job_id}: {e}", exc_info=True)

    async def _publish(self, job_id: str, status: str, **extra: Any):
        """Announce a status change. Failures are logged; the job record stays authoritative."""
        if self.publisher is None:
            return
        try:
            await self.publisher.publish_job_update(job_id=job_id, status=status, **extra)
        except Exception as e:
            logger.warning(f"Could not publish {status} update for job {job_id}: {e}", exc_info=True)
