"""Job repository for CRUD operations on Jobs collection."""
from typing import Optional, List, Dict, Any
from motor.motor_asyncio import AsyncIOMotorDatabase
from database.repositories.base import write_operation
from shared.utils import generate_job_id, get_utc_now


class JobStatus:
    """Job status constants."""
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    ACTIVE = (PENDING, PROCESSING)
    TERMINAL = (COMPLETED, FAILED, CANCELLED)


class JobType:
    """Job type constants."""
    GENERATE = "generate"
    REGENERATE = "regenerate"

    ALL = (GENERATE, REGENERATE)


class JobRepository:
    """Repository for Job CRUD operations.

    Every status write is conditional on the status it leaves, so a job can
    only move forward through pending -> processing -> completed/failed or
    pending -> cancelled.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        self.collection = db.jobs

    @write_operation("create job")
    async def create_job(
        self,
        job_type: str,
        keyword: str,
        intent: str,
        custom_prompt: Optional[str] = None,
        use_custom_only: bool = False,
        keyword_id: Optional[str] = None,
        article_slug: Optional[str] = None
    ) -> Dict[str, Any]:
        """Create a new pending job record."""
        job_id = generate_job_id()
        now = get_utc_now()

        job = {
            "_id": job_id,
            "job_type": job_type,
            "keyword": keyword,
            "intent": intent,
            "custom_prompt": custom_prompt,
            "use_custom_only": use_custom_only,
            "keyword_id": keyword_id,
            "article_slug": article_slug,
            "status": JobStatus.PENDING,
            "article_id": None,
            "error": None,
            "ai_provider": None,
            "created_at": now,
            "updated_at": now
        }

        await self.collection.insert_one(job)
        return job

    async def get_job(self, job_id: str) -> Optional[Dict[str, Any]]:
        """Get a job by ID."""
        return await self.collection.find_one({"_id": job_id})

    async def _transition(
        self,
        job_id: str,
        from_status: str,
        to_status: str,
        **fields: Any
    ) -> bool:
        result = await self.collection.update_one(
            {"_id": job_id, "status": from_status},
            {
                "$set": {
                    "status": to_status,
                    "updated_at": get_utc_now(),
                    **fields
                }
            }
        )
        return result.modified_count > 0

    @write_operation("start job")
    async def start_processing(self, job_id: str) -> bool:
        """Move a pending job to processing. Returns False if it is no longer pending."""
        return await self._transition(job_id, JobStatus.PENDING, JobStatus.PROCESSING)

    @write_operation("record job provider")
    async def set_ai_provider(self, job_id: str, provider: str) -> bool:
        """Record which AI provider is serving a job."""
        result = await self.collection.update_one(
            {"_id": job_id},
            {"$set": {"ai_provider": provider}}
        )
        return result.modified_count > 0

    @write_operation("complete job")
    async def complete_job(self, job_id: str, article_id: str) -> bool:
        """Mark a processing job as completed with its article."""
        return await self._transition(
            job_id,
            JobStatus.PROCESSING,
            JobStatus.COMPLETED,
            article_id=article_id,
            error=None
        )

    @write_operation("fail job")
    async def fail_job(self, job_id: str, error: str) -> bool:
        """Mark a processing job as failed with an error message."""
        return await self._transition(
            job_id,
            JobStatus.PROCESSING,
            JobStatus.FAILED,
            error=error,
            article_id=None
        )

    @write_operation("cancel job")
    async def cancel_job(self, job_id: str) -> bool:
        """Cancel a job if it is still pending."""
        return await self._transition(job_id, JobStatus.PENDING, JobStatus.CANCELLED)

    async def list_active_jobs(self, limit: int = 100) -> List[Dict[str, Any]]:
        """List pending and processing jobs, newest first."""
        cursor = self.collection.find(
            {"status": {"$in": list(JobStatus.ACTIVE)}}
        ).sort("created_at", -1).limit(limit)
        return await cursor.to_list(length=limit)
