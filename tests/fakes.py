"""In-memory stand-ins for the Mongo repositories, used by service tests."""
import copy
from typing import Any, Dict, List, Optional

from database.repositories.job_repo import JobStatus
from database.repositories.keyword_repo import KeywordStatus
from shared.utils import generate_article_id, generate_job_id, get_utc_now


class FakeJobRepository:
    """Dict-backed JobRepository with the same conditional transitions."""

    def __init__(self):
        self.jobs: Dict[str, Dict[str, Any]] = {}
        self.history: Dict[str, List[str]] = {}

    async def create_job(self, job_type, keyword, intent, custom_prompt=None,
                         use_custom_only=False, keyword_id=None, article_slug=None):
        now = get_utc_now()
        job = {
            "_id": generate_job_id(),
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
            "updated_at": now,
        }
        self.jobs[job["_id"]] = job
        self.history[job["_id"]] = [JobStatus.PENDING]
        return copy.deepcopy(job)

    async def get_job(self, job_id):
        job = self.jobs.get(job_id)
        return copy.deepcopy(job) if job else None

    async def _transition(self, job_id, from_status, to_status, **fields):
        job = self.jobs.get(job_id)
        if not job or job["status"] != from_status:
            return False
        job.update(status=to_status, updated_at=get_utc_now(), **fields)
        self.history[job_id].append(to_status)
        return True

    async def start_processing(self, job_id):
        return await self._transition(job_id, JobStatus.PENDING, JobStatus.PROCESSING)

    async def set_ai_provider(self, job_id, provider):
        if job_id in self.jobs:
            self.jobs[job_id]["ai_provider"] = provider
            return True
        return False

    async def complete_job(self, job_id, article_id):
        return await self._transition(job_id, JobStatus.PROCESSING, JobStatus.COMPLETED,
                                      article_id=article_id, error=None)

    async def fail_job(self, job_id, error):
        return await self._transition(job_id, JobStatus.PROCESSING, JobStatus.FAILED,
                                      error=error, article_id=None)

    async def cancel_job(self, job_id):
        return await self._transition(job_id, JobStatus.PENDING, JobStatus.CANCELLED)

    async def list_active_jobs(self, limit=100):
        active = [j for j in self.jobs.values() if j["status"] in JobStatus.ACTIVE]
        active.sort(key=lambda j: j["created_at"], reverse=True)
        return copy.deepcopy(active[:limit])


class FakeArticleRepository:
    """Dict-backed ArticleRepository with a unique slug and version checks."""

    def __init__(self):
        self.articles: Dict[str, Dict[str, Any]] = {}

    def add(self, slug, content_html, title="Title", meta_description="Meta",
            tags=None, previous_content_html=None, version=1):
        article = {
            "_id": generate_article_id(),
            "slug": slug,
            "title": title,
            "meta_description": meta_description,
            "content_html": content_html,
            "previous_content_html": previous_content_html,
            "tags": list(tags or []),
            "main_keyword": slug.replace("-", " "),
            "image_url": None,
            "image_alt": None,
            "keyword_id": None,
            "author": "Admin",
        }
        if version is not None:
            article["version"] = version
        self.articles[article["_id"]] = article
        return article

    async def create_article(self, slug, title, meta_description, content_html, tags,
                             main_keyword, image_url=None, image_alt=None, keyword_id=None):
        if await self.slug_exists(slug):
            return None
        article = self.add(slug, content_html, title, meta_description, tags)
        article.update(main_keyword=main_keyword, image_url=image_url,
                       image_alt=image_alt, keyword_id=keyword_id)
        return copy.deepcopy(article)

    async def get_article(self, article_id):
        article = self.articles.get(article_id)
        return copy.deepcopy(article) if article else None

    async def get_article_by_slug(self, slug):
        for article in self.articles.values():
            if article["slug"] == slug:
                return copy.deepcopy(article)
        return None

    async def get_article_summary(self, article_id):
        article = self.articles.get(article_id)
        if not article:
            return None
        return {"_id": article["_id"], "title": article["title"], "slug": article["slug"]}

    async def slug_exists(self, slug):
        return any(a["slug"] == slug for a in self.articles.values())

    async def update_content(self, article_id, expected_version, fields):
        article = self.articles.get(article_id)
        if not article or article.get("version") != expected_version:
            return None
        article.update(fields)
        article["version"] = article.get("version", 0) + 1
        return copy.deepcopy(article)


class FakeKeywordRepository:
    def __init__(self):
        self.keywords: Dict[str, Dict[str, Any]] = {}

    def add(self, keyword_id, term):
        self.keywords[keyword_id] = {"_id": keyword_id, "term": term, "status": KeywordStatus.NEW}

    async def get_keyword(self, keyword_id):
        return copy.deepcopy(self.keywords.get(keyword_id))

    async def mark_published(self, keyword_id):
        if keyword_id not in self.keywords:
            return False
        self.keywords[keyword_id]["status"] = KeywordStatus.PUBLISHED
        return True


class FakeSettingRepository:
    def __init__(self, values: Optional[Dict[str, str]] = None):
        self.values = dict(values or {})

    async def get_product_knowledge(self):
        if self.values.get("enableProductKnowledge") == "disabled":
            return ""
        return self.values.get("productKnowledge", "")

    async def get_ai_provider(self, default):
        return self.values.get("aiProvider") or default
