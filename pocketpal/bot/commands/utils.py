from datetime import date, datetime

from telegram import Update
from telegram.ext import ContextTypes


def get_user_id(update: Update) -> str:
    return str(update.effective_user.id)


def get_today(context: ContextTypes.DEFAULT_TYPE) -> date:
    """Today in the app's timezone, the same zone used to bucket records."""
    return datetime.now(context.bot_data["tz"]).date()


async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Sends a welcome message when /start is issued."""
    await update.message.reply_text(
        "Hey! 👋 I'm PocketPal, your money sidekick. Log what you earn and spend, "
        "save for goals, split costs with friends and keep your hustle streak alive 🔥\n\n"
        "Quick start:\n"
        "- `/income 40 gig Lawn mowing` to log income.\n"
        "- `/expense 5.50 food Coffee` to log an expense.\n"
        "- `/balance` to see where you stand.\n"
        "- `/help` for everything else.",
        parse_mode="Markdown",
    )


async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Sends the command reference when /help is issued."""
    await update.message.reply_text(
        "*Money in and out:*\n"
        "- `/income [amount] [gig|allowance|job|other] [title]`\n"
        "- `/gig [amount] [hustle type] [cost] [title]`: gig income with what it cost you.\n"
        "- `/expense [amount] [food|shopping|tech|entertainment] [title]`\n"
        "- `/recent`: your last 5 entries.\n"
        "- `/balance`: income, expenses, net and budget left this month.\n"
        "- `/analytics`: weekly, monthly and category charts.\n\n"
        "*Goals:*\n"
        "- `/goals`: your goals and progress.\n"
        "- `/newgoal [target] [title]`: start saving for something.\n"
        "- `/contribute [goal number] [10|25]`: add to a goal.\n"
        "- `/deletegoal [goal number]`\n\n"
        "*Splits:*\n"
        "- `/split`: split a cost with friends (step by step).\n"
        "- `/splits`: your splits and who has paid.\n"
        "- `/paid [split number] [name]`: mark someone as paid (again to undo).\n"
        "- `/deletesplit [split number]`\n\n"
        "*Hustle & learning:*\n"
        "- `/streak`: your hustle streak and this week's activity.\n"
        "- `/insights [optional context]`: AI money tips.\n"
        "- `/news` or `/news refresh`: money news explained.",
        parse_mode="Markdown",
    )
