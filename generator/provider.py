"""Client for the generative text providers that write articles."""
import asyncio
import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import aiohttp
from bs4 import BeautifulSoup

from generator.prompts import ZAI_SYSTEM_PROMPT, build_article_prompt
from shared.config import settings
from shared.exceptions import ProviderError

logger = logging.getLogger(__name__)

GEMINI = "gemini"
ZAI = "zai"

META_DESCRIPTION_MAX = 160

_JSON_FALLBACK = re.compile(r'\{[\s\S]*"title"[\s\S]*"content_html"[\s\S]*\}')
_LINK_PATTERNS = [
    (re.compile(r"\[(https?://[^\]|]+)\|([^\]]+)\]"), r'<a href="\1">\2</a>'),
    (re.compile(r"\[([^\]|]+)\|(https?://[^\]]+)\]"), r'<a href="\2">\1</a>'),
    (re.compile(r"\[([^\]]+)\]\((https?://[^)]+)\)"), r'<a href="\2">\1</a>'),
    (re.compile(r"\[(https?://[^\]]+)\]"), r'<a href="\1">\1</a>'),
]


@dataclass
class GeneratedArticle:
    """Container for a provider's article output."""
    title: str
    meta_description: str
    content_html: str
    tags: List[str] = field(default_factory=list)


def extract_json(text: str) -> str:
    """Pull the JSON payload out of a model response (code fences, chatter around it)."""
    json_str = text.strip()

    if "```json" in text:
        json_str = text.split("```json", 1)[1].split("```", 1)[0].strip()
    elif "```" in text:
        json_str = text.split("```", 2)[1].strip()

    if json_str.startswith(("<", "Maaf", "Sorry")):
        match = _JSON_FALLBACK.search(text)
        if not match:
            raise ProviderError(
                "AI response is not valid JSON. Please try again. "
                f"Response started with: {json_str[:50]}"
            )
        json_str = match.group(0)

    starts = [i for i in (json_str.find("{"), json_str.find("[")) if i != -1]
    if starts:
        json_str = json_str[min(starts):]

    closing = "}" if json_str.startswith("{") else "]"
    end = json_str.rfind(closing)
    if end != -1:
        json_str = json_str[:end + 1]

    return json_str


def strip_html(html: Optional[str]) -> str:
    """Reduce an HTML fragment to collapsed plain text."""
    if not html:
        return ""
    text = BeautifulSoup(html, "html.parser").get_text(" ")
    return re.sub(r"\s+", " ", text.replace("\xa0", " ")).strip()


def fix_malformed_links(content: str) -> str:
    """Rewrite wiki-style and markdown links into HTML anchors."""
    if not content:
        return ""
    for pattern, replacement in _LINK_PATTERNS:
        content = pattern.sub(replacement, content)
    return content


def post_process_article(data: Dict[str, Any]) -> GeneratedArticle:
    """Normalize a decoded provider payload into a GeneratedArticle."""
    if not isinstance(data, dict):
        raise ProviderError("AI response JSON is not an object")

    meta_description = strip_html(data.get("meta_description"))
    if len(meta_description) > META_DESCRIPTION_MAX:
        meta_description = meta_description[:META_DESCRIPTION_MAX - 3] + "..."

    content_html = fix_malformed_links(data.get("content_html") or "")
    content_html = re.sub(r"\s+", " ", content_html.replace("&nbsp;", " "))

    title = strip_html(data.get("title"))
    if not title or not content_html.strip():
        raise ProviderError("AI response is missing title or content_html")

    tags = data.get("tags") or []
    if not isinstance(tags, list):
        tags = [tags]

    return GeneratedArticle(
        title=title,
        meta_description=meta_description,
        content_html=content_html,
        tags=[str(tag).strip() for tag in tags if str(tag).strip()]
    )


class ArticleGenerator:
    """Generates articles through Gemini or an OpenAI-compatible Z.AI endpoint."""

    def __init__(self, timeout: int = None):
        self.timeout = timeout or settings.provider_timeout
        self.headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def resolve_provider(self, provider: Optional[str]) -> str:
        """Pick the provider to call; Z.AI is only used when its key is configured."""
        if provider == ZAI and settings.zai_api_key:
            return ZAI
        return GEMINI

    async def generate_article(
        self,
        keyword: str,
        intent: str,
        custom_prompt: str = "",
        product_knowledge: str = "",
        use_custom_only: bool = False,
        provider: Optional[str] = None
    ) -> GeneratedArticle:
        """
        Generate an SEO article for a keyword.

        Any failure is raised as ProviderError with the cause in its message.
        """
        prompt = build_article_prompt(
            keyword, intent, custom_prompt, product_knowledge, use_custom_only
        )
        selected = self.resolve_provider(provider)
        logger.info(f"Using {selected} for article generation: {keyword!r}")

        try:
            if selected == ZAI:
                text = await self._generate_with_zai(prompt)
            else:
                text = await self._generate_with_gemini(prompt)
            return post_process_article(json.loads(extract_json(text)))
        except asyncio.TimeoutError as e:
            raise ProviderError(
                f"Failed to generate article: Timeout after {self.timeout} seconds"
            ) from e
        except aiohttp.ClientError as e:
            raise ProviderError(f"Failed to generate article: Network error: {e}") from e
        except json.JSONDecodeError as e:
            raise ProviderError(
                f"Failed to generate article: {selected} returned invalid JSON format"
            ) from e
        except ProviderError as e:
            raise ProviderError(f"Failed to generate article: {e.message}") from e

    async def _generate_with_gemini(self, prompt: str) -> str:
        if not settings.gemini_api_key:
            raise ProviderError("GEMINI_API_KEY is not configured")

        url = f"{settings.gemini_base_url.rstrip('/')}/models/{settings.gemini_model}:generateContent"
        payload = {"contents": [{"role": "user", "parts": [{"text": prompt}]}]}
        data = await self._post_json(url, payload, {"x-goog-api-key": settings.gemini_api_key})

        try:
            return data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError) as e:
            raise ProviderError("Gemini response did not contain any text") from e

    async def _generate_with_zai(self, prompt: str) -> str:
        url = f"{settings.zai_base_url.rstrip('/')}/chat/completions"
        payload = {
            "model": settings.zai_model,
            "messages": [
                {"role": "system", "content": ZAI_SYSTEM_PROMPT},
                {"role": "user", "content": prompt}
            ],
            "temperature": 0.5,
            "response_format": {"type": "json_object"}
        }
        data = await self._post_json(url, payload, {"Authorization": f"Bearer {settings.zai_api_key}"})

        try:
            text = data["choices"][0]["message"]["content"] or "{}"
        except (KeyError, IndexError, TypeError) as e:
            raise ProviderError("Z.AI response did not contain a message") from e
        logger.debug(f"Z.AI raw response length: {len(text)}")
        return text

    async def _post_json(self, url: str, payload: Dict[str, Any], extra_headers: Dict[str, str]) -> Dict[str, Any]:
        async with aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=self.timeout),
            headers={**self.headers, **extra_headers}
        ) as session:
            async with session.post(url, json=payload) as response:
                if response.status == 429:
                    raise ProviderError("Provider quota exceeded (HTTP 429)")
                if response.status >= 400:
                    body = await response.text()
                    raise ProviderError(f"HTTP Error {response.status}: {body[:200]}")
                return await response.json(content_type=None)
