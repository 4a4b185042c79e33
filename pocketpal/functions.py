# pocketpal/functions.py
import logging

from flask import Flask, jsonify, request

from pocketpal.core import ai
from pocketpal.core.errors import UpstreamError

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


def _error_response(error: UpstreamError):
    return jsonify({"error": str(error)}), error.status_code


def register_functions(app: Flask, generator) -> Flask:
    """Adds the AI-content endpoints to an existing Flask app."""

    @app.after_request
    def add_cors_headers(response):
        response.headers.update(CORS_HEADERS)
        return response

    @app.route("/financial-insights", methods=["POST", "OPTIONS"])
    def financial_insights():
        if request.method == "OPTIONS":
            return "", 200

        body = request.get_json(silent=True) or {}
        user_context = body.get("userContext") if isinstance(body, dict) else None
        try:
            insights = ai.generate_insights(generator, user_context)
        except UpstreamError as e:
            logger.error("Error in financial-insights function: %s", e)
            return _error_response(e)
        except Exception as e:
            logger.exception("Unexpected error in financial-insights function")
            return jsonify({"error": str(e) or "Unknown error"}), 500
        return jsonify({"insights": [insight.to_json() for insight in insights]}), 200

    @app.route("/financial-news", methods=["POST", "OPTIONS"])
    def financial_news():
        if request.method == "OPTIONS":
            return "", 200

        try:
            news = ai.generate_news(generator)
        except UpstreamError as e:
            logger.error("Error in financial-news function: %s", e)
            return _error_response(e)
        except Exception as e:
            logger.exception("Unexpected error in financial-news function")
            return jsonify({"error": str(e) or "Unknown error"}), 500
        return jsonify({"news": [item.to_json() for item in news]}), 200

    return app


def create_functions_app(generator) -> Flask:
    return register_functions(Flask(__name__), generator)
