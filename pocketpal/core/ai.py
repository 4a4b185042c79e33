# pocketpal/core/ai.py
import json
import logging
import re
from typing import Any, Dict, List, Optional

import google.generativeai as genai
import requests
from google.api_core import exceptions as google_exceptions
from google.generativeai.types import HarmBlockThreshold, HarmCategory

from pocketpal import config
from pocketpal.core.enrichment import enrich_insight, enrich_news_item
from pocketpal.core.errors import (
    MalformedUpstreamContent,
    UpstreamError,
    UpstreamRateLimited,
    UpstreamUnavailable,
)
from pocketpal.core.models import Insight, NewsItem

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "Rate limit exceeded. Please try again later."
QUOTA_MESSAGE = "Service temporarily unavailable."

INSIGHT_COUNT = 3
NEWS_COUNT = 4

safety_settings = {
    HarmCategory.HARM_CATEGORY_HARASSMENT: HarmBlockThreshold.BLOCK_NONE,
    HarmCategory.HARM_CATEGORY_HATE_SPEECH: HarmBlockThreshold.BLOCK_NONE,
    HarmCategory.HARM_CATEGORY_SEXUALLY_EXPLICIT: HarmBlockThreshold.BLOCK_NONE,
    HarmCategory.HARM_CATEGORY_DANGEROUS_CONTENT: HarmBlockThreshold.BLOCK_NONE,
}

INSIGHTS_SYSTEM_PROMPT = f"""You are a financial education assistant for young people learning about money management. Generate {INSIGHT_COUNT} current, relevant financial insights or tips that would interest someone learning about personal finance.

Each insight should be educational, actionable, and relate to one of these topics:
- Basic money concepts
- Income and expenses
- Saving strategies
- Financial goal setting
- Budgeting
- Understanding credit
- Introduction to investing

Respond with a JSON array of exactly {INSIGHT_COUNT} insights. Each insight should have:
- id: a unique string
- title: a catchy headline (max 60 chars)
- summary: a brief explanation (max 120 chars)
- category: one of "saving", "spending", "investing", "budgeting", "credit", "general"
- impact: "positive", "negative", or "neutral" indicating the tone
- keywords: array of 2-3 keywords for matching to lessons

IMPORTANT: Respond ONLY with the JSON array, no other text."""

NEWS_SYSTEM_PROMPT = f"""You are a financial news curator for young people learning about money. Generate {NEWS_COUNT} current, educational financial news items that are relevant and easy to understand.

Focus on news that teaches financial concepts like:
- Stock market trends and what they mean
- Interest rates and their impact on savings
- Inflation and purchasing power
- Cryptocurrency developments
- Economic indicators
- Personal finance tips from current events

Each news item should be:
- Educational and explain WHY it matters
- Written for beginners (no jargon without explanation)
- Current and relevant (use today's date context)
- Connected to practical money lessons

Respond with a JSON array of exactly {NEWS_COUNT} news items. Each item should have:
- id: unique string
- headline: catchy title (max 70 chars)
- summary: brief explanation of news and why it matters (max 150 chars)
- category: one of "markets", "economy", "crypto", "banking", "investing", "personal-finance"
- sentiment: "bullish" (positive/growing), "bearish" (negative/declining), or "neutral"
- relatedTopic: the financial concept this teaches (e.g., "compound interest", "diversification", "inflation")
- keywords: array of 2-3 keywords for matching to lessons

IMPORTANT: Respond ONLY with the JSON array, no other text. Make the news feel current and relevant."""

NEWS_USER_PROMPT = (
    f"Generate {NEWS_COUNT} current financial news items for today that would help "
    "a young person learn about money and markets."
)

_FENCE_RE = re.compile(r"```(?:json)?\n?")


class GatewayTextGenerator:
    """Chat-completions gateway reached over HTTP with a bearer key."""

    key_name = "AI_GATEWAY_KEY"

    def __init__(self, api_key: Optional[str], url: str = config.AI_GATEWAY_URL,
                 model: str = config.AI_MODEL, timeout: float = config.REQUEST_TIMEOUT_SECONDS):
        self.api_key = api_key
        self.url = url
        self.model = model
        self.timeout = timeout

    def generate(self, system_prompt: str, user_prompt: str) -> str:
        if not self.api_key:
            raise UpstreamError(f"{self.key_name} is not configured")

        try:
            response = requests.post(
                self.url,
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                json={
                    "model": self.model,
                    "messages": [
                        {"role": "system", "content": system_prompt},
                        {"role": "user", "content": user_prompt},
                    ],
                },
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.error("AI gateway request failed: %s", e)
            raise UpstreamUnavailable("AI gateway is unreachable") from e

        if response.status_code == 429:
            raise UpstreamRateLimited(RATE_LIMIT_MESSAGE)
        if response.status_code == 402:
            raise UpstreamUnavailable(QUOTA_MESSAGE, status_code=402)
        if not response.ok:
            logger.error("AI gateway error: %s %s", response.status_code, response.text)
            raise UpstreamUnavailable("AI gateway request failed")

        try:
            data = response.json()
        except ValueError as e:
            raise MalformedUpstreamContent("Invalid response format from AI") from e

        choices = data.get("choices") if isinstance(data, dict) else None
        content = None
        if choices:
            content = (choices[0].get("message") or {}).get("content")
        if not content:
            raise MalformedUpstreamContent("No content in AI response")
        return content


class GeminiTextGenerator:
    """Google Gemini through the google-generativeai SDK."""

    key_name = "GOOGLE_API_KEY"

    def __init__(self, api_key: Optional[str], model: str = config.GEMINI_MODEL):
        self.api_key = api_key
        self.model = model
        if api_key:
            genai.configure(api_key=api_key)

    def generate(self, system_prompt: str, user_prompt: str) -> str:
        if not self.api_key:
            raise UpstreamError(f"{self.key_name} is not configured")

        try:
            model_instance = genai.GenerativeModel(
                model_name=self.model,
                system_instruction=system_prompt,
                safety_settings=safety_settings,
            )
            response = model_instance.generate_content(user_prompt)
        except google_exceptions.ResourceExhausted as e:
            raise UpstreamRateLimited(RATE_LIMIT_MESSAGE) from e
        except google_exceptions.GoogleAPIError as e:
            logger.error("Gemini error: %s", e)
            raise UpstreamUnavailable("Gemini request failed") from e

        # Blocked or empty answers come back without parts
        if not response.parts:
            logger.debug("Gemini returned an empty or blocked response: %s", response)
            raise MalformedUpstreamContent("No content in AI response")
        return response.text.strip()


def get_text_generator(provider: str = config.AI_PROVIDER):
    """Builds the generator selected by AI_PROVIDER."""
    if provider == "gemini":
        return GeminiTextGenerator(config.GOOGLE_API_KEY, config.GEMINI_MODEL)
    return GatewayTextGenerator(config.AI_GATEWAY_KEY)


def parse_model_json(content: str) -> List[Dict[str, Any]]:
    """
    Parses the model output as a JSON array of objects.
    Markdown code fences around the JSON are stripped first.
    """
    clean_content = _FENCE_RE.sub("", content or "").strip()
    try:
        items = json.loads(clean_content)
    except (json.JSONDecodeError, ValueError) as e:
        logger.error("Failed to parse AI response: %s", content)
        raise MalformedUpstreamContent("Invalid response format from AI") from e

    if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
        logger.error("AI response is not a list of objects: %s", content)
        raise MalformedUpstreamContent("Invalid response format from AI")
    return items


def generate_insights(generator, user_context: Optional[str] = None) -> List[Insight]:
    if user_context:
        user_prompt = f"Generate financial insights for someone with: {user_context}"
    else:
        user_prompt = (
            f"Generate {INSIGHT_COUNT} general financial insights for a young person "
            "learning about money."
        )
    content = generator.generate(INSIGHTS_SYSTEM_PROMPT, user_prompt)
    logger.debug("Raw insights response: %s", content)
    return [enrich_insight(item) for item in parse_model_json(content)]


def generate_news(generator) -> List[NewsItem]:
    content = generator.generate(NEWS_SYSTEM_PROMPT, NEWS_USER_PROMPT)
    logger.debug("Raw news response: %s", content)
    return [enrich_news_item(item) for item in parse_model_json(content)]
