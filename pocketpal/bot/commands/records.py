import logging
from decimal import Decimal

from telegram import Update
from telegram.ext import ContextTypes
from telegram.helpers import escape_markdown

from pocketpal.bot.commands.utils import get_today, get_user_id
from pocketpal.core import aggregation, db
from pocketpal.core.errors import PocketPalError, ValidationError
from pocketpal.core.models import EXPENSE_CATEGORIES, INCOME_CATEGORIES, Income
from pocketpal.utils.text_utils import format_money, parse_amount

INCOME_XP = 25

logger = logging.getLogger(__name__)


def _parse_entry(args, categories):
    """Splits `[amount] [category] [title...]` and validates each part."""
    args = args or []
    if len(args) < 3:
        raise ValidationError("Please fill in all fields")
    amount = parse_amount(args[0])
    category = args[1].lower()
    if category not in categories:
        raise ValidationError(f"Category must be one of: {', '.join(categories)}")
    return amount, category, " ".join(args[2:]).strip()


async def income_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Logs an income: /income [amount] [category] [title]."""
    supabase_client = context.bot_data["supabase_client"]
    try:
        amount, category, title = _parse_entry(context.args, INCOME_CATEGORIES)
        db.add_income(supabase_client, get_user_id(update), amount, title, category)
    except ValidationError as e:
        await update.message.reply_text(
            f"⚠️ {escape_markdown(str(e))}\nUsage: `/income [amount] [{'|'.join(INCOME_CATEGORIES)}] [title]`",
            parse_mode="Markdown",
        )
        return
    except PocketPalError as e:
        await update.message.reply_text(f"❌ Couldn't save your income: {e}")
        return

    await update.message.reply_text(
        f"✅ Added {format_money(amount)} income! +{INCOME_XP} XP\n{title} logged successfully 🥳"
    )


async def gig_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Logs gig income with its cost: /gig [amount] [hustle type] [cost] [title]."""
    supabase_client = context.bot_data["supabase_client"]
    args = context.args or []
    try:
        if len(args) < 4:
            raise ValidationError("Please fill in all fields")
        amount = parse_amount(args[0])
        cost = parse_amount(args[2], field="cost")
        title = " ".join(args[3:]).strip()
        income = db.add_income(
            supabase_client, get_user_id(update), amount, title, "gig",
            hustle_type=args[1].lower(), cost=cost,
        )
    except ValidationError as e:
        await update.message.reply_text(
            f"⚠️ {escape_markdown(str(e))}\nUsage: `/gig [amount] [hustle type] [cost] [title]`", parse_mode="Markdown"
        )
        return
    except PocketPalError as e:
        await update.message.reply_text(f"❌ Couldn't save your gig: {e}")
        return

    await update.message.reply_text(
        f"💼 {title}: earned {format_money(amount)}, profit {format_money(income.profit)}. "
        f"+{INCOME_XP} XP 🔥"
    )


async def expense_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Logs an expense and warns when the monthly budget runs low."""
    supabase_client = context.bot_data["supabase_client"]
    user_id = get_user_id(update)
    try:
        amount, category, title = _parse_entry(context.args, EXPENSE_CATEGORIES)
        db.add_expense(supabase_client, user_id, amount, title, category)
    except ValidationError as e:
        await update.message.reply_text(
            f"⚠️ {escape_markdown(str(e))}\nUsage: `/expense [amount] [{'|'.join(EXPENSE_CATEGORIES)}] [title]`",
            parse_mode="Markdown",
        )
        return
    except PocketPalError as e:
        await update.message.reply_text(f"❌ Couldn't save your expense: {e}")
        return

    saved_message = f"✅ Logged {format_money(amount)} expense\n{title} tracked successfully"
    try:
        expenses = db.get_expenses(supabase_client, user_id)
    except PocketPalError as e:
        logger.warning("Budget check skipped after saving expense: %s", e)
        await update.message.reply_text(saved_message)
        return

    today = get_today(context)
    spent = aggregation.total_expenses(
        aggregation.records_in_month(expenses, today.year, today.month, context.bot_data["tz"])
    )
    remaining = aggregation.budget_remaining(context.bot_data["monthly_budget"], spent)
    status = aggregation.budget_status(remaining, context.bot_data["budget_warning_threshold"])

    if status == "over":
        await update.message.reply_text(
            f"🚨 Warning: Over budget!\nYou're {format_money(abs(remaining))} over your monthly budget."
        )
    elif status == "low":
        await update.message.reply_text(
            f"⚠️ Budget Alert!\nOnly {format_money(remaining)} left this month. Be careful!"
        )
    else:
        await update.message.reply_text(saved_message)


async def recent_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Shows the latest income and expense entries."""
    supabase_client = context.bot_data["supabase_client"]
    user_id = get_user_id(update)
    try:
        incomes = db.get_incomes(supabase_client, user_id)
        expenses = db.get_expenses(supabase_client, user_id)
    except PocketPalError as e:
        await update.message.reply_text(f"❌ Couldn't load your activity: {e}")
        return

    recent = aggregation.recent_activity(incomes, expenses)
    if not recent:
        await update.message.reply_text("Nothing logged yet. Try `/income` or `/expense`!", parse_mode="Markdown")
        return

    lines = ["🧾 Recent activity:"]
    tz = context.bot_data["tz"]
    for record in recent:
        sign = "+" if isinstance(record, Income) else "-"
        day = aggregation.local_date(record.created_at, tz).strftime("%b %d")
        lines.append(f"{sign}{format_money(record.amount)}  {record.title} ({record.category}, {day})")
    await update.message.reply_text("\n".join(lines))


async def balance_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Totals, net balance and the budget left for the current month."""
    supabase_client = context.bot_data["supabase_client"]
    user_id = get_user_id(update)
    try:
        incomes = db.get_incomes(supabase_client, user_id)
        expenses = db.get_expenses(supabase_client, user_id)
    except PocketPalError as e:
        await update.message.reply_text(f"❌ Couldn't load your balance: {e}")
        return

    records = incomes + expenses
    today = get_today(context)
    tz = context.bot_data["tz"]
    spent_this_month = aggregation.total_expenses(
        aggregation.records_in_month(expenses, today.year, today.month, tz)
    )
    budget = Decimal(context.bot_data["monthly_budget"])
    remaining = aggregation.budget_remaining(budget, spent_this_month)

    await update.message.reply_text(
        f"💰 Income: {format_money(aggregation.total_income(records))}\n"
        f"💸 Expenses: {format_money(aggregation.total_expenses(records))}\n"
        f"📊 Net: {format_money(aggregation.net_balance(records))}\n\n"
        f"This month: {format_money(remaining)} left "
        f"({format_money(spent_this_month)} of {format_money(budget)} used)"
    )
