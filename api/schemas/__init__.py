# Schemas module
from .requests import JobCreateRequest, SettingUpdateRequest
from .responses import (
    JobResponse,
    JobDetailResponse,
    JobCancelResponse,
    ArticleSummary,
    ArticleResponse,
    UndoResponse,
    SettingResponse,
    ErrorResponse
)

__all__ = [
    "JobCreateRequest",
    "SettingUpdateRequest",
    "JobResponse",
    "JobDetailResponse",
    "JobCancelResponse",
    "ArticleSummary",
    "ArticleResponse",
    "UndoResponse",
    "SettingResponse",
    "ErrorResponse"
]
