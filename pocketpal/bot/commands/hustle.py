from telegram import Update
from telegram.ext import ContextTypes

from pocketpal.bot.commands.utils import get_today, get_user_id
from pocketpal.core import db, streaks
from pocketpal.core.errors import PocketPalError
from pocketpal.utils.text_utils import format_money


async def streak_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Hustle streak, this week's activity and gig earnings."""
    supabase_client = context.bot_data["supabase_client"]
    try:
        incomes = db.get_incomes(supabase_client, get_user_id(update))
    except PocketPalError as e:
        await update.message.reply_text(f"❌ Couldn't load your hustle stats: {e}")
        return

    today = get_today(context)
    active = streaks.active_dates(incomes, context.bot_data["tz"])
    streak = streaks.current_streak(active, today)
    mask = streaks.week_mask(active, today)
    summary = streaks.hustle_summary(incomes)

    week = " ".join(f"{day['label']}{'🔥' if day['active'] else '·'}" for day in mask)
    lines = [
        f"🔥 {streak} Day Streak!" if streak else "No streak yet. Log a gig today to start one!",
        week,
        "",
        f"💼 Gigs: {summary['count']}",
        f"Earned {format_money(summary['earned'])}, costs {format_money(summary['costs'])}, "
        f"profit {format_money(summary['profit'])}",
    ]
    for hustle_type, totals in summary["by_type"].items():
        lines.append(f"- {hustle_type}: {format_money(totals['profit'])} profit")
    await update.message.reply_text("\n".join(lines))
