from telegram import Update
from telegram.ext import ContextTypes

from pocketpal.bot.commands.utils import get_today, get_user_id
from pocketpal.core import aggregation, charts, db
from pocketpal.core.errors import PocketPalError
from pocketpal.utils.text_utils import format_money


async def analytics_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Sends the weekly, monthly and category charts."""
    supabase_client = context.bot_data["supabase_client"]
    user_id = get_user_id(update)
    try:
        incomes = db.get_incomes(supabase_client, user_id)
        expenses = db.get_expenses(supabase_client, user_id)
    except PocketPalError as e:
        await update.message.reply_text(f"❌ Couldn't load your analytics: {e}")
        return

    records = incomes + expenses
    if not records:
        await update.message.reply_text(
            "Not enough data for charts yet. Log some income and expenses first!"
        )
        return

    await update.message.reply_text("Crunching your numbers, one moment... 📊")
    today = get_today(context)
    tz = context.bot_data["tz"]

    week = aggregation.weekly_rollup(records, today, tz=tz)
    week_income = sum((day["income"] for day in week), aggregation.ZERO)
    week_expenses = sum((day["expenses"] for day in week), aggregation.ZERO)
    week_chart = charts.generate_weekly_chart(records, today, tz=tz)
    week_chart.name = "weekly_chart.png"
    await update.message.reply_photo(
        photo=week_chart,
        caption=(
            f"This week: {format_money(week_income)} in, {format_money(week_expenses)} out, "
            f"net {format_money(week_income - week_expenses)}"
        ),
    )

    monthly_chart = charts.generate_monthly_chart(records, today, tz=tz)
    monthly_chart.name = "monthly_chart.png"
    await update.message.reply_photo(photo=monthly_chart, caption="Your monthly trend")

    for subset, title, filename in (
        (expenses, "Where your money goes", "expense_breakdown.png"),
        (incomes, "Where your money comes from", "income_breakdown.png"),
    ):
        chart = charts.generate_breakdown_chart(subset, title)
        if chart:
            chart.name = filename
            await update.message.reply_photo(photo=chart, caption=title)
