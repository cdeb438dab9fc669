"""Prompt construction for article generation."""
import re

OUTPUT_FORMAT = """**CRITICAL OUTPUT FORMAT - YOU MUST FOLLOW THIS EXACTLY:**
Return ONLY a valid JSON object. No explanations, no apologies, no extra text. Just the JSON:
{
  "title": "Your compelling title here (plain text, no HTML)",
  "meta_description": "Your meta description here - PLAIN TEXT ONLY, 120-160 chars, NO HTML TAGS",
  "tags": ["tag1", "tag2", "tag3"],
  "content_html": "<h2>First Section</h2><p>Content here...</p>..."
}"""

ZAI_SYSTEM_PROMPT = (
    "You are an expert content writer. You MUST respond with ONLY a valid JSON object.\n"
    "CRITICAL: Your entire response must be ONLY the JSON object - no text before or after it.\n"
    'The JSON must have these exact keys: "title", "meta_description", "tags", "content_html".\n'
    "Do not include any explanations, markdown formatting, or code blocks. Just pure JSON."
)


def _apply_placeholders(template: str, keyword: str, intent: str) -> str:
    # Placeholders are case-insensitive: {keyword}, {KEYWORD}, {Intent}
    result = re.sub(r"\{keyword\}", lambda _: keyword, template, flags=re.IGNORECASE)
    return re.sub(r"\{intent\}", lambda _: intent, result, flags=re.IGNORECASE)


def build_article_prompt(
    keyword: str,
    intent: str,
    custom_prompt: str = "",
    product_knowledge: str = "",
    use_custom_only: bool = False
) -> str:
    """
    Build the article generation prompt.

    When use_custom_only is set and a custom prompt is given, the custom
    prompt replaces the standard instructions; only product knowledge and the
    output format are appended.
    """
    if use_custom_only and custom_prompt and custom_prompt.strip():
        prompt = _apply_placeholders(custom_prompt, keyword, intent)
        if product_knowledge:
            prompt += f"\n\n**Product Knowledge (gunakan informasi ini dalam artikel):**\n{product_knowledge}"
        return f"{prompt}\n\n{OUTPUT_FORMAT}"

    product_section = (
        f"\n**IMPORTANT - Product Knowledge (use this factual information in the article):**\n{product_knowledge}\n"
        if product_knowledge else ""
    )
    custom_section = (
        f"\n**Content Improvement Notes (apply these when writing the article):**\n{custom_prompt}\n"
        if custom_prompt else ""
    )

    return f"""You are an expert Content Writer using E-E-A-T standards. Write a comprehensive article for the keyword: "{keyword}".
The search intent is: {intent}.
{product_section}{custom_section}
**TONE & STYLE:**
- Target audience: Young adults (Gen Z and Millennials) in Indonesia
- Use casual, friendly and conversational Indonesian; use "kamu", never the formal "Anda"
- Prefer short, punchy sentences and short paragraphs (3 sentences max)

**SEO REQUIREMENTS:**
1. The title MUST contain the keyword "{keyword}" naturally. Plain text only.
2. The meta description MUST include "{keyword}" and be 120-160 characters of plain text.
3. Mention "{keyword}" within the first paragraph and naturally throughout (1-2% density).
4. Use at least 4-5 <h2> headings and some <h3> subheadings.
5. Add 1-2 relevant external links as <a href="https://example.com">anchor text</a>.
   Never use wiki-style [url|text] or markdown [text](url) links.
6. Write 800-1200 words using only <h2>, <h3>, <p>, <ul>, <li>, <strong> and <a> tags.
7. Generate 3-5 short, lowercase tags.

{OUTPUT_FORMAT}

REMINDER: Your entire response must be valid JSON only. Do not include any text before or after the JSON object."""
