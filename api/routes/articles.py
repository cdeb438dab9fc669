"""Article routes for the REST API."""
from fastapi import APIRouter, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from database.connection import get_db
from api.services.article_service import ArticleService, UNDO_MESSAGES
from api.schemas.responses import ArticleResponse, ErrorResponse, UndoResponse


router = APIRouter(
    prefix="/articles",
    tags=["articles"],
    responses={404: {"model": ErrorResponse, "description": "Article not found"}}
)


async def get_article_service(db: AsyncIOMotorDatabase = Depends(get_db)) -> ArticleService:
    """Dependency for the article service."""
    return ArticleService(db)


@router.get("/{slug}", response_model=ArticleResponse)
async def get_article(
    slug: str,
    service: ArticleService = Depends(get_article_service)
):
    """Get an article by slug."""
    article = await service.get_article(slug)
    return ArticleResponse.from_document(article)


@router.post(
    "/{slug}/undo",
    response_model=UndoResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Nothing to undo"},
        409: {"model": ErrorResponse, "description": "Article changed concurrently"}
    }
)
async def undo_article(
    slug: str,
    service: ArticleService = Depends(get_article_service)
):
    """Undo the last regeneration (or undo) of an article."""
    article, scope = await service.undo_article(slug)
    return UndoResponse.from_document(
        article,
        message=UNDO_MESSAGES[scope],
        restored=scope
    )
