"""Request schemas for API endpoints."""
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class JobCreateRequest(BaseModel):
    """Request schema for job creation.

    Required fields are checked by the job service so that missing values
    are reported as 400 with a readable message.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    job_type: str = Field(default="generate", description="generate or regenerate")
    keyword_id: Optional[str] = Field(default=None, description="Keyword to mark published on success")
    keyword: Optional[str] = Field(default=None, description="Keyword to write about")
    intent: Optional[str] = Field(default=None, description="Search intent, e.g. informational")
    custom_prompt: Optional[str] = Field(default=None, description="Extra instructions for the writer")
    article_slug: Optional[str] = Field(default=None, description="Target article (regenerate only)")
    use_custom_only: bool = Field(default=False, description="Use the custom prompt as the entire prompt")


class SettingUpdateRequest(BaseModel):
    """Request schema for updating a setting."""
    value: str = Field(..., description="New setting value")
