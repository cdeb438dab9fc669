"""Shared utility functions."""
import re
import time
import unicodedata
import uuid
from datetime import datetime, timezone
from typing import Optional
from urllib.parse import quote

JOB_ID_PATTERN = re.compile(r"^job_[0-9a-f]{12}$")


def generate_job_id() -> str:
    """Generate a unique job ID."""
    return f"job_{uuid.uuid4().hex[:12]}"


def generate_article_id() -> str:
    """Generate a unique article ID."""
    return f"art_{uuid.uuid4().hex[:12]}"


def is_valid_job_id(job_id: str) -> bool:
    """Check that a job ID has the shape produced by generate_job_id."""
    return bool(JOB_ID_PATTERN.match(job_id or ""))


def get_utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)


def format_datetime(dt: Optional[datetime]) -> Optional[str]:
    """Format datetime to ISO format string."""
    if dt is None:
        return None
    return dt.isoformat()


def slugify(text: str) -> str:
    """Convert text to a lowercase, URL-safe ASCII slug."""
    # Transliterate accents (café -> cafe) and drop anything else non-ASCII
    slug = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    slug = slug.lower().strip()
    slug = re.sub(r"[^a-z0-9\s_-]", "", slug)
    slug = re.sub(r"[\s_-]+", "-", slug)
    slug = slug.strip("-")
    return slug[:200]


def disambiguate_slug(slug: str) -> str:
    """Append a millisecond timestamp to a slug that is already taken."""
    return f"{slug}-{int(time.time() * 1000)}"


def placeholder_image_url(base_url: str, slug: str) -> str:
    """Build a deterministic placeholder image URL seeded by the slug."""
    return f"{base_url.rstrip('/')}/seed/{quote(slug, safe='')}/800/400"
