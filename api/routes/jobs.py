"""Job routes for the REST API."""
from typing import List
from fastapi import APIRouter, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase
import redis.asyncio as redis

from database.connection import get_db, get_redis
from api.services.job_service import JobService
from api.services.publisher import PublisherService
from api.schemas.requests import JobCreateRequest
from api.schemas.responses import (
    ErrorResponse,
    JobResponse,
    JobDetailResponse,
    JobCancelResponse
)


router = APIRouter(
    prefix="/jobs",
    tags=["jobs"],
    responses={
        400: {"model": ErrorResponse, "description": "Invalid request or job state"},
        404: {"model": ErrorResponse, "description": "Job not found"}
    }
)


async def get_job_service(
    db: AsyncIOMotorDatabase = Depends(get_db),
    redis_client: redis.Redis = Depends(get_redis)
) -> JobService:
    """Dependency for the job service."""
    return JobService(db, PublisherService(redis_client))


@router.post("", response_model=JobResponse)
async def create_job(
    request: JobCreateRequest,
    service: JobService = Depends(get_job_service)
):
    """
    Create a generate or regenerate job.

    - Validates input (keyword, intent, article slug for regenerate)
    - Stores the job as pending
    - Starts processing in the background
    - Returns the pending job immediately
    """
    job = await service.create_job(request)
    return JobResponse.from_document(job)


@router.get("", response_model=List[JobResponse])
async def list_active_jobs(service: JobService = Depends(get_job_service)):
    """List pending and processing jobs, newest first."""
    jobs = await service.list_active_jobs()
    return [JobResponse.from_document(job) for job in jobs]


@router.get("/{job_id}", response_model=JobDetailResponse)
async def get_job(
    job_id: str,
    service: JobService = Depends(get_job_service)
):
    """Get a job's status, with the article it produced once completed."""
    job = await service.get_job(job_id)
    return JobDetailResponse.from_document(job)


@router.delete("/{job_id}", response_model=JobCancelResponse)
async def cancel_job(
    job_id: str,
    service: JobService = Depends(get_job_service)
):
    """Cancel a pending job."""
    job = await service.cancel_job(job_id)
    return JobCancelResponse(
        job_id=job_id,
        status=job["status"],
        message="Job cancelled"
    )
