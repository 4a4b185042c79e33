from telegram import Update
from telegram.ext import ContextTypes
from telegram.helpers import escape_markdown

from pocketpal.bot.handlers import ASKING_SPLIT_NAMES, ASKING_SPLIT_TITLE, PENDING_SPLIT_KEY


async def handle_split_title(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    title, _, description = update.message.text.partition("|")
    title = title.strip()
    if not title:
        await update.message.reply_text("Please enter a title")
        return ASKING_SPLIT_TITLE

    pending = context.user_data.setdefault(PENDING_SPLIT_KEY, {})
    pending["title"] = title
    pending["description"] = description.strip() or None

    await update.message.reply_text(
        f"Got it: *{escape_markdown(title)}* 👍\n"
        "Who's in? Send the names separated by commas, yourself included.\n"
        "Example: `Me, Sam, Alex`",
        parse_mode="Markdown",
    )
    return ASKING_SPLIT_NAMES
