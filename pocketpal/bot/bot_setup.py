# pocketpal/bot/bot_setup.py
import logging

from telegram.ext import Application, CommandHandler, ConversationHandler, MessageHandler, filters

from pocketpal.bot.commands import ALL_COMMANDS
from pocketpal.bot.handlers import (
    ASKING_SPLIT_AMOUNTS,
    ASKING_SPLIT_CONFIRMATION,
    ASKING_SPLIT_NAMES,
    ASKING_SPLIT_RECEIPT,
    ASKING_SPLIT_TITLE,
    handle_split_amounts,
    handle_split_cancel,
    handle_split_confirmation,
    handle_split_names,
    handle_split_receipt,
    handle_split_start,
    handle_split_title,
)

logger = logging.getLogger(__name__)

BOT_DATA_KEYS = (
    "supabase_client",
    "tz",
    "monthly_budget",
    "budget_warning_threshold",
    "functions_transport",
    "news_client",
)


def build_split_conversation() -> ConversationHandler:
    text_only = filters.TEXT & ~filters.COMMAND
    return ConversationHandler(
        entry_points=[CommandHandler("split", handle_split_start)],
        states={
            ASKING_SPLIT_TITLE: [MessageHandler(text_only, handle_split_title)],
            ASKING_SPLIT_NAMES: [MessageHandler(text_only, handle_split_names)],
            ASKING_SPLIT_AMOUNTS: [MessageHandler(text_only, handle_split_amounts)],
            ASKING_SPLIT_RECEIPT: [
                MessageHandler(filters.PHOTO | text_only, handle_split_receipt)
            ],
            ASKING_SPLIT_CONFIRMATION: [MessageHandler(text_only, handle_split_confirmation)],
        },
        fallbacks=[CommandHandler("cancel", handle_split_cancel)],
    )


def setup_bot(config: dict) -> Application:
    """
    Builds the Telegram application with every command and the /split conversation.

    `config` carries the bot token plus the shared objects handlers read from
    `bot_data` (see BOT_DATA_KEYS). The application is not started here; the
    webhook in main.py feeds it updates.
    """
    application = Application.builder().token(config["TELEGRAM_BOT_TOKEN"]).build()

    for key in BOT_DATA_KEYS:
        application.bot_data[key] = config[key]

    # The conversation goes first so /split is not shadowed.
    application.add_handler(build_split_conversation())
    for name, callback in ALL_COMMANDS.items():
        application.add_handler(CommandHandler(name, callback))

    logger.info("Telegram bot configured with %d commands for webhooks", len(ALL_COMMANDS) + 1)
    return application
