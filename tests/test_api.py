"""Tests for API endpoints."""
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from unittest.mock import MagicMock

from api.main import app
from api.routes.articles import get_article_service
from api.routes.jobs import get_job_service
from api.services.article_service import ArticleService
from database.connection import get_db
from shared.snapshots import ContentSnapshot, encode_snapshot


@pytest.fixture
def article_service(store):
    service = ArticleService(MagicMock())
    service.article_repo = store.articles
    return service


@pytest_asyncio.fixture
async def client(job_service, article_service, mock_mongo_db):
    """HTTP client with services wired to the in-memory store."""
    app.dependency_overrides[get_job_service] = lambda: job_service
    app.dependency_overrides[get_article_service] = lambda: article_service
    app.dependency_overrides[get_db] = lambda: mock_mongo_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


class TestJobEndpoints:
    """Tests for the /jobs endpoints."""

    @pytest.mark.asyncio
    async def test_create_job_returns_pending(self, client, dispatcher):
        """Test job creation answers immediately with a pending job."""
        response = await client.post("/jobs", json={
            "jobType": "generate",
            "keyword": "kopi susu",
            "intent": "informational"
        })

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "pending"
        assert data["jobType"] == "generate"
        assert data["articleId"] is None
        assert data["id"].startswith("job_")

        await dispatcher.wait_all()

    @pytest.mark.asyncio
    async def test_poll_completed_job(self, client, dispatcher):
        """Test a completed job exposes its article summary."""
        created = await client.post("/jobs", json={"keyword": "kopi susu", "intent": "informational"})
        await dispatcher.wait_all()

        response = await client.get(f"/jobs/{created.json()['id']}")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "completed"
        assert data["aiProvider"] == "gemini"
        assert data["article"]["slug"] == "kopi-susu"
        assert data["article"]["id"] == data["articleId"]

    @pytest.mark.asyncio
    async def test_regenerate_without_slug_is_400(self, client, store):
        """Test missing article slug on regenerate is a client error."""
        response = await client.post("/jobs", json={
            "jobType": "regenerate",
            "keyword": "kopi susu",
            "intent": "informational"
        })

        assert response.status_code == 400
        assert response.json() == {"error": "Article slug is required for regenerate jobs"}
        assert store.jobs.jobs == {}

    @pytest.mark.asyncio
    async def test_missing_keyword_is_400(self, client):
        """Test missing keyword is a client error."""
        response = await client.post("/jobs", json={"intent": "informational"})

        assert response.status_code == 400
        assert response.json()["error"] == "Keyword and intent are required"

    @pytest.mark.asyncio
    async def test_malformed_body_is_400(self, client):
        """Test a body that is not an object is a client error."""
        response = await client.post("/jobs", json=["kopi susu"])

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid request"

    @pytest.mark.asyncio
    async def test_get_job_invalid_id(self, client):
        """Test getting job with an invalid ID."""
        response = await client.get("/jobs/not-a-job")

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid job ID"}

    @pytest.mark.asyncio
    async def test_get_job_not_found(self, client):
        """Test getting a job that does not exist."""
        response = await client.get("/jobs/job_000000000000")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_cancel_pending_job(self, client, store):
        """Test cancelling a pending job."""
        job = await store.jobs.create_job("generate", "kopi susu", "informational")

        response = await client.delete(f"/jobs/{job['_id']}")

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "jobId": job["_id"],
            "status": "cancelled",
            "message": "Job cancelled"
        }

    @pytest.mark.asyncio
    async def test_cancel_processing_job_is_400(self, client, store):
        """Test a processing job cannot be cancelled."""
        job = await store.jobs.create_job("generate", "kopi susu", "informational")
        await store.jobs.start_processing(job["_id"])

        response = await client.delete(f"/jobs/{job['_id']}")

        assert response.status_code == 400
        assert response.json() == {"error": "Cannot cancel a job that is already processing"}

    @pytest.mark.asyncio
    async def test_list_active_jobs(self, client, store):
        """Test listing active jobs."""
        job = await store.jobs.create_job("generate", "kopi susu", "informational")

        response = await client.get("/jobs")

        assert response.status_code == 200
        assert [j["id"] for j in response.json()] == [job["_id"]]


class TestArticleEndpoints:
    """Tests for the /articles endpoints."""

    @pytest.mark.asyncio
    async def test_get_article(self, client, store):
        store.articles.add("kopi-susu", "<p>Halo</p>", tags=["kopi"])

        response = await client.get("/articles/kopi-susu")

        assert response.status_code == 200
        data = response.json()
        assert data["contentHtml"] == "<p>Halo</p>"
        assert data["previousContentHtml"] is None
        assert data["tags"] == ["kopi"]

    @pytest.mark.asyncio
    async def test_get_article_with_json_string_tags(self, client, store):
        article = store.articles.add("kopi-susu", "<p>Halo</p>")
        store.articles.articles[article["_id"]]["tags"] = '["kopi", "susu"]'

        response = await client.get("/articles/kopi-susu")

        assert response.status_code == 200
        assert response.json()["tags"] == ["kopi", "susu"]

    @pytest.mark.asyncio
    async def test_undo_structured(self, client, store):
        previous = ContentSnapshot("<p>OLD</p>", "Old title", "Old meta", ["lama"])
        store.articles.add("kopi-susu", "<p>NEW</p>", title="New title",
                           previous_content_html=encode_snapshot(previous))

        response = await client.post("/articles/kopi-susu/undo")

        assert response.status_code == 200
        data = response.json()
        assert data["restored"] == "all"
        assert data["message"] == "All fields restored to previous version"
        assert data["title"] == "Old title"
        assert data["contentHtml"] == "<p>OLD</p>"

    @pytest.mark.asyncio
    async def test_undo_legacy(self, client, store):
        store.articles.add("kopi-susu", "<p>NEW</p>", previous_content_html="<p>OLD</p>")

        response = await client.post("/articles/kopi-susu/undo")

        assert response.status_code == 200
        data = response.json()
        assert data["restored"] == "content"
        assert data["message"] == "Content restored to previous version (legacy format, content only)"
        assert data["previousContentHtml"] == "<p>NEW</p>"

    @pytest.mark.asyncio
    async def test_undo_without_previous_is_400(self, client, store):
        store.articles.add("kopi-susu", "<p>ONLY</p>")

        response = await client.post("/articles/kopi-susu/undo")

        assert response.status_code == 400
        assert response.json() == {"error": "No previous version available to undo"}

    @pytest.mark.asyncio
    async def test_undo_unknown_article_is_404(self, client):
        response = await client.post("/articles/tidak-ada/undo")

        assert response.status_code == 404
        assert response.json() == {"error": "Article not found"}


class TestSettingEndpoints:
    """Tests for the /settings endpoints."""

    @pytest.mark.asyncio
    async def test_unknown_setting_is_empty(self, client):
        response = await client.get("/settings/productKnowledge")

        assert response.status_code == 200
        assert response.json()["value"] == ""

    @pytest.mark.asyncio
    async def test_update_setting(self, client, mock_mongo_db):
        response = await client.put("/settings/aiProvider", json={"value": "zai"})

        assert response.status_code == 200
        assert response.json()["key"] == "aiProvider"
        assert response.json()["value"] == "zai"
        mock_mongo_db.settings.update_one.assert_awaited_once()


class TestHealth:
    """Tests for service endpoints."""

    @pytest.mark.asyncio
    async def test_health_check(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    @pytest.mark.asyncio
    async def test_error_schema_is_documented(self, client):
        response = await client.get("/openapi.json")

        schema = response.json()
        undo = schema["paths"]["/articles/{slug}/undo"]["post"]["responses"]
        assert undo["409"]["content"]["application/json"]["schema"]["$ref"].endswith("/ErrorResponse")
        cancel = schema["paths"]["/jobs/{job_id}"]["delete"]["responses"]
        assert "400" in cancel and "404" in cancel
