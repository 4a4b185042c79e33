# pocketpal/main.py
import asyncio
import logging
from decimal import Decimal
from zoneinfo import ZoneInfo

from flask import jsonify, request
from telegram import Update

from pocketpal import config as app_config
from pocketpal.bot.bot_setup import setup_bot
from pocketpal.core.ai import get_text_generator
from pocketpal.core.cache import TTLCache
from pocketpal.core.content_clients import FunctionsTransport, NewsClient
from pocketpal.core.db import get_supabase_client
from pocketpal.functions import create_functions_app

logging.basicConfig(
    level=app_config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

WEBHOOK_PATH = "/webhook"

# --- Global setup, runs once when the WSGI server imports the module ---
try:
    supabase_client = get_supabase_client()
    logger.info("Supabase client initialised")

    functions_transport = FunctionsTransport(
        app_config.FUNCTIONS_BASE_URL,
        api_key=app_config.SUPABASE_KEY,
        timeout=app_config.REQUEST_TIMEOUT_SECONDS,
    )
    news_client = NewsClient(functions_transport, TTLCache(app_config.NEWS_CACHE_TTL_SECONDS))

    bot_config = {
        "TELEGRAM_BOT_TOKEN": app_config.TELEGRAM_BOT_TOKEN,
        "supabase_client": supabase_client,
        "tz": ZoneInfo(app_config.APP_TIMEZONE),
        "monthly_budget": Decimal(app_config.MONTHLY_BUDGET),
        "budget_warning_threshold": Decimal(app_config.BUDGET_WARNING_THRESHOLD),
        "functions_transport": functions_transport,
        "news_client": news_client,
    }
    ptb_application = setup_bot(bot_config)

    try:
        asyncio.run(ptb_application.initialize())
        logger.info("Telegram application initialised")
    except RuntimeError as e:
        if "cannot run an event loop while another loop is running" not in str(e):
            raise
        logger.warning("Event loop already running, skipping explicit initialise")

    # The content endpoints and the webhook share one Flask app.
    flask_app = create_functions_app(get_text_generator(app_config.AI_PROVIDER))

    @flask_app.route(WEBHOOK_PATH, methods=["POST"])
    async def telegram_webhook():
        if not request.is_json:
            logger.error("Webhook received non-JSON request")
            return jsonify({"status": "error", "message": "Request must be JSON"}), 400

        update_json = request.get_json()
        try:
            update = Update.de_json(update_json, ptb_application.bot)
            await ptb_application.process_update(update)
            return jsonify({"status": "ok"}), 200
        except Exception:
            logger.exception("Failed to process Telegram update")
            return jsonify({"status": "error", "message": "Failed to process update"}), 500

    wsgi_app = flask_app
    logger.info("WSGI app ready")

except Exception:
    logger.exception("Critical error while starting pocketpal.main")
    raise
