from telegram import ReplyKeyboardRemove, Update
from telegram.ext import ContextTypes, ConversationHandler

from pocketpal.bot.handlers import ASKING_SPLIT_TITLE, PENDING_SPLIT_KEY


async def handle_split_start(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    """Entry point of /split."""
    context.user_data[PENDING_SPLIT_KEY] = {}
    await update.message.reply_text(
        "Let's split a cost! 🧾\n"
        "What was it for? Send a title, optionally followed by `| description`.\n"
        "Example: `Pizza night | Sam's birthday`\n\n"
        "Send /cancel at any time to stop.",
        parse_mode="Markdown",
        reply_markup=ReplyKeyboardRemove(),
    )
    return ASKING_SPLIT_TITLE


async def handle_split_cancel(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    context.user_data.pop(PENDING_SPLIT_KEY, None)
    await update.message.reply_text("Split cancelled. 👋", reply_markup=ReplyKeyboardRemove())
    return ConversationHandler.END
