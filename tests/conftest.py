"""Pytest configuration and fixtures."""
import pytest
from types import SimpleNamespace
from unittest.mock import MagicMock, AsyncMock

from api.services.dispatcher import JobDispatcher
from api.services.job_service import JobService
from generator.executor import JobExecutor
from generator.provider import ArticleGenerator, GeneratedArticle
from tests.fakes import (
    FakeArticleRepository,
    FakeJobRepository,
    FakeKeywordRepository,
    FakeSettingRepository,
)


@pytest.fixture
def mock_mongo_db():
    """Create mock MongoDB database."""
    db = MagicMock()

    for name in ("jobs", "articles", "keywords", "settings"):
        collection = MagicMock()
        collection.find_one = AsyncMock(return_value=None)
        collection.insert_one = AsyncMock()
        collection.update_one = AsyncMock(return_value=MagicMock(modified_count=1))
        collection.find_one_and_update = AsyncMock()
        collection.count_documents = AsyncMock(return_value=0)
        collection.find = MagicMock()
        setattr(db, name, collection)

    return db


@pytest.fixture
def mock_redis_client():
    """Create mock Redis client."""
    redis = AsyncMock()
    redis.publish = AsyncMock(return_value=1)
    return redis


@pytest.fixture
def store():
    """In-memory repositories shared by the service under test."""
    return SimpleNamespace(
        jobs=FakeJobRepository(),
        articles=FakeArticleRepository(),
        keywords=FakeKeywordRepository(),
        settings=FakeSettingRepository(),
    )


@pytest.fixture
def generated_article():
    """Provider output used by default."""
    return GeneratedArticle(
        title="Kopi Susu Kekinian",
        meta_description="Semua tentang kopi susu kekinian",
        content_html="<h2>Kopi susu</h2><p>NEW</p>",
        tags=["kopi", "susu"]
    )


@pytest.fixture
def generator(generated_article):
    """Article generator whose provider call is mocked."""
    gen = ArticleGenerator(timeout=5)
    gen.generate_article = AsyncMock(return_value=generated_article)
    return gen


@pytest.fixture
def publisher():
    """Mock job update publisher."""
    pub = MagicMock()
    pub.publish_job_update = AsyncMock(return_value=True)
    return pub


def wire_executor(executor: JobExecutor, store) -> JobExecutor:
    executor.job_repo = store.jobs
    executor.article_repo = store.articles
    executor.keyword_repo = store.keywords
    executor.setting_repo = store.settings
    return executor


@pytest.fixture
def executor(store, publisher, generator):
    """Executor wired to the in-memory store."""
    return wire_executor(JobExecutor(MagicMock(), publisher, generator), store)


@pytest.fixture
def dispatcher():
    """A dispatcher private to the test."""
    return JobDispatcher()


@pytest.fixture
def job_service(store, publisher, generator, dispatcher):
    """Job service wired to the in-memory store."""
    service = JobService(MagicMock(), publisher, dispatcher, generator)
    service.job_repo = store.jobs
    service.article_repo = store.articles
    wire_executor(service.executor, store)
    return service


@pytest.fixture
def sample_job():
    """Create sample job data."""
    return {
        "_id": "job_0123456789ab",
        "job_type": "generate",
        "keyword": "kopi susu",
        "intent": "informational",
        "custom_prompt": None,
        "use_custom_only": False,
        "keyword_id": None,
        "article_slug": None,
        "status": "pending",
        "article_id": None,
        "error": None,
        "ai_provider": None,
        "created_at": "2024-02-04T10:30:00Z",
        "updated_at": "2024-02-04T10:30:00Z"
    }


@pytest.fixture
def sample_article():
    """Create sample article data."""
    return {
        "_id": "art_test00000001",
        "slug": "kopi-susu",
        "title": "Kopi Susu",
        "meta_description": "Tentang kopi susu",
        "content_html": "<p>OLD</p>",
        "previous_content_html": None,
        "tags": ["kopi"],
        "main_keyword": "kopi susu",
        "image_url": "https://picsum.photos/seed/kopi-susu/800/400",
        "image_alt": "Ilustrasi Kopi Susu",
        "keyword_id": None,
        "author": "Admin",
        "version": 1,
        "published_at": "2024-02-04T10:32:00Z",
        "created_at": "2024-02-04T10:32:00Z",
        "updated_at": "2024-02-04T10:32:00Z"
    }
