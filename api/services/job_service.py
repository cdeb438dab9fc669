"""Job lifecycle service: create, cancel, read and list generation jobs."""
import logging
from typing import List, Dict, Any, Optional
from motor.motor_asyncio import AsyncIOMotorDatabase

from api.schemas.requests import JobCreateRequest
from api.services.dispatcher import JobDispatcher, dispatcher as default_dispatcher
from database.repositories.job_repo import JobRepository, JobStatus, JobType
from database.repositories.article_repo import ArticleRepository
from generator.executor import JobExecutor
from generator.provider import ArticleGenerator
from shared.exceptions import ConflictError, NotFoundError, ValidationError
from shared.utils import is_valid_job_id

logger = logging.getLogger(__name__)


class JobService:
    """Owns the job state machine from the caller's side."""

    def __init__(
        self,
        db: AsyncIOMotorDatabase,
        publisher=None,
        job_dispatcher: Optional[JobDispatcher] = None,
        generator: Optional[ArticleGenerator] = None
    ):
        self.job_repo = JobRepository(db)
        self.article_repo = ArticleRepository(db)
        self.publisher = publisher
        self.dispatcher = job_dispatcher or default_dispatcher
        self.executor = JobExecutor(db, publisher, generator)

    @staticmethod
    def validate_request(request: JobCreateRequest):
        """Reject a creation request before anything is written."""
        if request.job_type not in JobType.ALL:
            raise ValidationError(f"Unknown job type: {request.job_type}")

        if not (request.keyword or "").strip() or not (request.intent or "").strip():
            raise ValidationError("Keyword and intent are required")

        if request.job_type == JobType.REGENERATE and not (request.article_slug or "").strip():
            raise ValidationError("Article slug is required for regenerate jobs")

    async def create_job(self, request: JobCreateRequest) -> Dict[str, Any]:
        """
        Persist a pending job and start executing it in the background.

        Returns as soon as the job is stored; provider latency is never
        observed by the caller.
        """
        self.validate_request(request)

        job = await self.job_repo.create_job(
            job_type=request.job_type,
            keyword=request.keyword.strip(),
            intent=request.intent.strip(),
            custom_prompt=request.custom_prompt or None,
            use_custom_only=request.use_custom_only,
            keyword_id=request.keyword_id or None,
            article_slug=request.article_slug or None
        )
        logger.info(f"Created {job['job_type']} job {job['_id']} for keyword {job['keyword']!r}")

        await self._publish(job["_id"], JobStatus.PENDING)
        self.dispatcher.dispatch(job["_id"], self.executor.run(job["_id"]))
        return job

    async def cancel_job(self, job_id: str) -> Dict[str, Any]:
        """Cancel a pending job."""
        job = await self.job_repo.get_job(job_id)
        if not job:
            raise NotFoundError(f"Job {job_id} not found")

        self._ensure_cancellable(job)

        if not await self.job_repo.cancel_job(job_id):
            # The executor picked it up after our read
            job = await self.job_repo.get_job(job_id)
            self._ensure_cancellable(job)
            raise ConflictError(f"Failed to cancel job {job_id}")

        logger.info(f"Job {job_id} cancelled")
        await self._publish(job_id, JobStatus.CANCELLED)

        return await self.job_repo.get_job(job_id)

    async def _publish(self, job_id: str, status: str):
        if self.publisher is None:
            return
        try:
            await self.publisher.publish_job_update(job_id=job_id, status=status)
        except Exception as e:
            logger.warning(f"Could not publish {status} update for job {job_id}: {e}", exc_info=True)

    @staticmethod
    def _ensure_cancellable(job: Dict[str, Any]):
        if job["status"] == JobStatus.PROCESSING:
            raise ConflictError("Cannot cancel a job that is already processing")
        if job["status"] != JobStatus.PENDING:
            raise ConflictError("Job is already finished")

    async def get_job(self, job_id: str) -> Dict[str, Any]:
        """Get a job, with its article summary once completed."""
        if not is_valid_job_id(job_id):
            raise ValidationError("Invalid job ID")

        job = await self.job_repo.get_job(job_id)
        if not job:
            raise NotFoundError(f"Job {job_id} not found")

        article = None
        if job["status"] == JobStatus.COMPLETED and job.get("article_id"):
            article = await self.article_repo.get_article_summary(job["article_id"])

        return {**job, "article": article}

    async def list_active_jobs(self) -> List[Dict[str, Any]]:
        """Pending and processing jobs, newest first."""
        return await self.job_repo.list_active_jobs()
