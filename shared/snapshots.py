"""Content snapshots stored in an article's previous_content_html field.

The field is an untyped string with three possible shapes:

- the tagged envelope written by this service (``{"format": "snapshot/v1", ...}``),
- an untagged JSON object with the same keys, written by older deployments,
- a bare HTML string (legacy, content only).

``decode_previous`` returns a ``ContentSnapshot`` for the first two and the
raw string for the last one.
"""
import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

SNAPSHOT_FORMAT = "snapshot/v1"


@dataclass
class ContentSnapshot:
    """The content-bearing fields of an article."""
    content_html: str
    title: str
    meta_description: Optional[str] = None
    tags: List[str] = field(default_factory=list)

    @classmethod
    def from_article(cls, article: Dict[str, Any]) -> "ContentSnapshot":
        """Capture the current content fields of an article document."""
        return cls(
            content_html=article.get("content_html") or "",
            title=article.get("title") or "",
            meta_description=article.get("meta_description"),
            tags=coerce_tags(article.get("tags")),
        )

    def to_fields(self) -> Dict[str, Any]:
        """Article document fields for this snapshot."""
        return {
            "content_html": self.content_html,
            "title": self.title,
            "meta_description": self.meta_description,
            "tags": list(self.tags),
        }


def encode_snapshot(snapshot: ContentSnapshot) -> str:
    """Serialize a snapshot into the tagged envelope."""
    return json.dumps({
        "format": SNAPSHOT_FORMAT,
        "contentHtml": snapshot.content_html,
        "title": snapshot.title,
        "metaDescription": snapshot.meta_description,
        "tags": list(snapshot.tags),
    }, ensure_ascii=False)


def coerce_tags(value: Any) -> List[str]:
    """Normalize stored tags to a list of strings."""
    # Older rows stored tags as a JSON-encoded string
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except json.JSONDecodeError:
            return [value] if value else []
    if isinstance(value, list):
        return [str(tag) for tag in value]
    return []


def decode_previous(raw: str) -> Union[ContentSnapshot, str]:
    """Decode a stored previous version into a snapshot or a legacy string."""
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        return raw

    if not isinstance(data, dict):
        return raw

    if data.get("format") != SNAPSHOT_FORMAT and "contentHtml" not in data:
        return raw

    return ContentSnapshot(
        content_html=data.get("contentHtml") or "",
        title=data.get("title") or "",
        meta_description=data.get("metaDescription"),
        tags=coerce_tags(data.get("tags")),
    )
