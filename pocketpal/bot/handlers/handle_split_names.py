from telegram import Update
from telegram.ext import ContextTypes

from pocketpal.bot.handlers import ASKING_SPLIT_AMOUNTS, ASKING_SPLIT_NAMES, PENDING_SPLIT_KEY
from pocketpal.core.splits import MIN_PARTICIPANTS


async def handle_split_names(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    names = [name.strip() for name in update.message.text.split(",") if name.strip()]

    if len(names) < MIN_PARTICIPANTS:
        await update.message.reply_text("Add at least 2 participant names first")
        return ASKING_SPLIT_NAMES
    if len({name.lower() for name in names}) != len(names):
        await update.message.reply_text("Participant names must be unique. Try again 🙂")
        return ASKING_SPLIT_NAMES

    context.user_data.setdefault(PENDING_SPLIT_KEY, {})["names"] = names
    await update.message.reply_text(
        f"{len(names)} people: {', '.join(names)}\n\n"
        "How much does each one owe?\n"
        "- `even 60` splits 60 evenly.\n"
        "- `20, 25, 15` sets amounts in the same order as the names.",
        parse_mode="Markdown",
    )
    return ASKING_SPLIT_AMOUNTS
