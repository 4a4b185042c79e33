# tests/test_ai.py
import json
import unittest
from unittest.mock import MagicMock, patch

import requests

from pocketpal.core import ai
from pocketpal.core.errors import (
    MalformedUpstreamContent,
    UpstreamError,
    UpstreamRateLimited,
    UpstreamUnavailable,
)


def gateway_response(status_code=200, content="[]"):
    response = MagicMock()
    response.status_code = status_code
    response.ok = status_code < 400
    response.text = "error body"
    response.json.return_value = {"choices": [{"message": {"content": content}}]}
    return response


class TestParseModelJson(unittest.TestCase):

    def test_strips_code_fences(self):
        content = '```json\n[{"title": "Save"}]\n```'
        self.assertEqual(ai.parse_model_json(content), [{"title": "Save"}])
        self.assertEqual(ai.parse_model_json('```\n[]\n```'), [])

    def test_plain_json(self):
        self.assertEqual(ai.parse_model_json(' [{"a": 1}] '), [{"a": 1}])

    def test_invalid_json(self):
        with self.assertRaisesRegex(MalformedUpstreamContent, "Invalid response format from AI"):
            ai.parse_model_json("Sure! Here are some tips")

    def test_not_a_list_of_objects(self):
        for content in ('{"title": "x"}', '["a", "b"]', "null"):
            with self.subTest(content=content):
                with self.assertRaises(MalformedUpstreamContent):
                    ai.parse_model_json(content)


class TestGatewayTextGenerator(unittest.TestCase):

    def setUp(self):
        self.generator = ai.GatewayTextGenerator("secret", url="https://gateway.test/chat", model="m1")

    @patch('requests.post')
    def test_success(self, mock_post):
        mock_post.return_value = gateway_response(content="hello")

        self.assertEqual(self.generator.generate("system", "user"), "hello")
        args, kwargs = mock_post.call_args
        self.assertEqual(args[0], "https://gateway.test/chat")
        self.assertEqual(kwargs["headers"]["Authorization"], "Bearer secret")
        self.assertEqual(kwargs["json"]["model"], "m1")
        self.assertEqual(kwargs["json"]["messages"][0], {"role": "system", "content": "system"})
        self.assertEqual(kwargs["json"]["messages"][1], {"role": "user", "content": "user"})

    @patch('requests.post')
    def test_rate_limited(self, mock_post):
        mock_post.return_value = gateway_response(429)
        with self.assertRaises(UpstreamRateLimited) as ctx:
            self.generator.generate("s", "u")
        self.assertEqual(str(ctx.exception), "Rate limit exceeded. Please try again later.")
        self.assertEqual(ctx.exception.status_code, 429)

    @patch('requests.post')
    def test_quota_exhausted(self, mock_post):
        mock_post.return_value = gateway_response(402)
        with self.assertRaises(UpstreamUnavailable) as ctx:
            self.generator.generate("s", "u")
        self.assertEqual(str(ctx.exception), "Service temporarily unavailable.")
        self.assertEqual(ctx.exception.status_code, 402)

    @patch('requests.post')
    def test_server_error(self, mock_post):
        mock_post.return_value = gateway_response(503)
        with self.assertRaises(UpstreamUnavailable) as ctx:
            self.generator.generate("s", "u")
        self.assertEqual(ctx.exception.status_code, 500)

    @patch('requests.post')
    def test_connection_error(self, mock_post):
        mock_post.side_effect = requests.exceptions.RequestException("Connection error")
        with self.assertRaises(UpstreamUnavailable):
            self.generator.generate("s", "u")

    @patch('requests.post')
    def test_empty_content(self, mock_post):
        mock_post.return_value = gateway_response(content="")
        with self.assertRaisesRegex(MalformedUpstreamContent, "No content in AI response"):
            self.generator.generate("s", "u")

    @patch('requests.post')
    def test_missing_key(self, mock_post):
        with self.assertRaisesRegex(UpstreamError, "AI_GATEWAY_KEY is not configured"):
            ai.GatewayTextGenerator(None).generate("s", "u")
        mock_post.assert_not_called()


class TestGenerateContent(unittest.TestCase):

    def test_generate_insights_enriches_items(self):
        generator = MagicMock()
        generator.generate.return_value = "```json\n" + json.dumps([{
            "id": "1",
            "title": "Build an emergency fund",
            "summary": "Three months of savings",
            "category": "saving",
            "impact": "positive",
            "keywords": ["emergency fund"],
        }]) + "\n```"

        insights = ai.generate_insights(generator, "I mow lawns")

        system_prompt, user_prompt = generator.generate.call_args[0]
        self.assertEqual(system_prompt, ai.INSIGHTS_SYSTEM_PROMPT)
        self.assertIn("I mow lawns", user_prompt)
        self.assertEqual(insights[0].related_lesson_id, 3)

    def test_generate_insights_without_context(self):
        generator = MagicMock()
        generator.generate.return_value = "[]"
        self.assertEqual(ai.generate_insights(generator), [])
        self.assertIn("general financial insights", generator.generate.call_args[0][1])

    def test_generate_news_propagates_upstream_errors(self):
        generator = MagicMock()
        generator.generate.side_effect = UpstreamRateLimited(ai.RATE_LIMIT_MESSAGE)
        with self.assertRaises(UpstreamRateLimited):
            ai.generate_news(generator)

    def test_get_text_generator(self):
        self.assertIsInstance(ai.get_text_generator("gateway"), ai.GatewayTextGenerator)
        with patch('pocketpal.core.ai.genai.configure'):
            self.assertIsInstance(ai.get_text_generator("gemini"), ai.GeminiTextGenerator)


class TestGeminiTextGenerator(unittest.TestCase):

    @patch('pocketpal.core.ai.genai')
    def test_blocked_response(self, mock_genai):
        mock_genai.GenerativeModel.return_value.generate_content.return_value = MagicMock(parts=[])
        generator = ai.GeminiTextGenerator("key", model="gemini-test")
        with self.assertRaises(MalformedUpstreamContent):
            generator.generate("s", "u")

    @patch('pocketpal.core.ai.genai')
    def test_success(self, mock_genai):
        mock_response = MagicMock(parts=["x"], text=" [] \n")
        mock_genai.GenerativeModel.return_value.generate_content.return_value = mock_response
        generator = ai.GeminiTextGenerator("key", model="gemini-test")

        self.assertEqual(generator.generate("system", "user"), "[]")
        mock_genai.GenerativeModel.assert_called_once_with(
            model_name="gemini-test",
            system_instruction="system",
            safety_settings=ai.safety_settings,
        )


if __name__ == '__main__':
    unittest.main()
