"""Response schemas for API endpoints."""
from typing import Any, Dict, List, Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from api.models.job import JobStatusEnum, JobTypeEnum
from shared.snapshots import coerce_tags


class CamelModel(BaseModel):
    """Base for responses serialized with camelCase keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class JobResponse(CamelModel):
    """Response schema for a job record."""
    id: str = Field(..., description="Unique job identifier")
    job_type: JobTypeEnum
    keyword: str
    intent: str
    custom_prompt: Optional[str] = None
    use_custom_only: bool = False
    keyword_id: Optional[str] = None
    article_slug: Optional[str] = None
    status: JobStatusEnum
    article_id: Optional[str] = None
    error: Optional[str] = None
    ai_provider: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_document(cls, job: Dict[str, Any]) -> "JobResponse":
        """Build a response from a job document."""
        fields = {key: value for key, value in job.items() if key not in ("_id", "article")}
        return cls(id=job["_id"], **fields)


class ArticleSummary(CamelModel):
    """Short description of the article a job produced."""
    id: str
    title: str
    slug: str


class JobDetailResponse(JobResponse):
    """Response schema for job status polling."""
    article: Optional[ArticleSummary] = Field(None, description="Linked article once completed")

    @classmethod
    def from_document(cls, job: Dict[str, Any]) -> "JobDetailResponse":
        response = super().from_document(job)
        article = job.get("article")
        if article:
            response.article = ArticleSummary(id=article["_id"], title=article["title"], slug=article["slug"])
        return response


class JobCancelResponse(CamelModel):
    """Response schema for job cancellation."""
    success: bool = True
    job_id: str = Field(..., description="Unique job identifier")
    status: JobStatusEnum = Field(..., description="New job status")
    message: str = Field(..., description="Cancellation message")


class ArticleResponse(CamelModel):
    """Response schema for an article."""
    id: str
    slug: str
    title: str
    meta_description: Optional[str] = None
    content_html: str
    previous_content_html: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    main_keyword: Optional[str] = None
    image_url: Optional[str] = None
    image_alt: Optional[str] = None
    keyword_id: Optional[str] = None
    author: Optional[str] = None
    version: int = 1
    published_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("tags", mode="before")
    @classmethod
    def normalize_tags(cls, value: Any) -> List[str]:
        # Older rows store tags as a JSON-encoded string
        return coerce_tags(value)

    @classmethod
    def from_document(cls, article: Dict[str, Any], **extra: Any):
        """Build a response from an article document."""
        fields = {key: value for key, value in article.items() if key != "_id"}
        return cls(id=article["_id"], **fields, **extra)


class UndoResponse(ArticleResponse):
    """Response schema for an undo request."""
    message: str = Field(..., description="What was restored")
    restored: str = Field(..., description="all or content")


class SettingResponse(CamelModel):
    """Response schema for a setting."""
    key: str
    value: str
    updated_at: Optional[datetime] = None


class ErrorResponse(BaseModel):
    """Schema for error responses."""
    error: str = Field(..., description="Error message")
    detail: Optional[str] = Field(None, description="Detailed error information")
