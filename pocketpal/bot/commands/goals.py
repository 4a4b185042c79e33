from telegram import Update
from telegram.ext import ContextTypes
from telegram.helpers import escape_markdown

from pocketpal.bot.commands.utils import get_user_id
from pocketpal.core import aggregation, db
from pocketpal.core.errors import PocketPalError, ValidationError
from pocketpal.utils.text_utils import format_money, parse_amount

GOAL_XP = 50


def _pick_goal(goals, raw_number: str):
    """Goals are addressed by their 1-based position in /goals."""
    if not raw_number.isdigit() or not 1 <= int(raw_number) <= len(goals):
        raise ValidationError(f"Goal number must be between 1 and {len(goals)}")
    return goals[int(raw_number) - 1]


async def goals_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Lists goals with their progress."""
    supabase_client = context.bot_data["supabase_client"]
    try:
        goals = db.get_goals(supabase_client, get_user_id(update))
    except PocketPalError as e:
        await update.message.reply_text(f"❌ Couldn't load your goals: {e}")
        return

    if not goals:
        await update.message.reply_text(
            "No goals yet. Start one with `/newgoal [target] [title]` 🎯", parse_mode="Markdown"
        )
        return

    lines = [f"🎯 Total saved: {format_money(aggregation.total_saved(goals))} "
             f"({aggregation.goals_completed(goals)} completed)"]
    for number, goal in enumerate(goals, start=1):
        percent = aggregation.goal_progress_percent(goal)
        done = " ✅" if goal.is_complete else ""
        lines.append(
            f"{number}. {goal.title}: {format_money(goal.current_amount)} of "
            f"{format_money(goal.target_amount)} ({percent}%){done}"
        )
    await update.message.reply_text("\n".join(lines))


async def new_goal_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Creates a goal: /newgoal [target] [title]."""
    supabase_client = context.bot_data["supabase_client"]
    args = context.args or []
    try:
        if len(args) < 2:
            raise ValidationError("Please fill in all fields")
        target = parse_amount(args[0], field="target")
        if target <= 0:
            raise ValidationError("The target must be more than zero")
        title = " ".join(args[1:]).strip()
        db.add_goal(supabase_client, get_user_id(update), title, target)
    except ValidationError as e:
        await update.message.reply_text(
            f"⚠️ {escape_markdown(str(e))}\nUsage: `/newgoal [target] [title]`", parse_mode="Markdown"
        )
        return
    except PocketPalError as e:
        await update.message.reply_text(f"❌ Failed to create goal: {e}")
        return

    await update.message.reply_text(f"🎉 Goal created! +{GOAL_XP} XP\nStart saving for {title}!")


async def contribute_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Adds 10 or 25 to a goal: /contribute [goal number] [10|25]."""
    supabase_client = context.bot_data["supabase_client"]
    args = context.args or []
    try:
        if not args:
            raise ValidationError("Which goal? Use the number from /goals")
        goals = db.get_goals(supabase_client, get_user_id(update))
        goal = _pick_goal(goals, args[0])
        amount = parse_amount(args[1]) if len(args) > 1 else db.CONTRIBUTION_STEPS[0]
        updated = db.contribute_to_goal(supabase_client, goal, amount)
    except ValidationError as e:
        await update.message.reply_text(
            f"⚠️ {escape_markdown(str(e))}\nUsage: `/contribute [goal number] [10|25]`", parse_mode="Markdown"
        )
        return
    except PocketPalError as e:
        await update.message.reply_text(f"❌ Failed to update goal: {e}")
        return

    message = (
        f"💪 Added {format_money(amount)} to goal!\n"
        f"{updated.title}: {format_money(updated.current_amount)}/{format_money(updated.target_amount)}"
    )
    if updated.is_complete:
        message += "\n🏆 Goal reached!"
    await update.message.reply_text(message)


async def delete_goal_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Deletes a goal: /deletegoal [goal number]."""
    supabase_client = context.bot_data["supabase_client"]
    args = context.args or []
    try:
        if not args:
            raise ValidationError("Which goal? Use the number from /goals")
        goals = db.get_goals(supabase_client, get_user_id(update))
        goal = _pick_goal(goals, args[0])
        db.delete_goal(supabase_client, goal.id)
    except ValidationError as e:
        await update.message.reply_text(
            f"⚠️ {escape_markdown(str(e))}\nUsage: `/deletegoal [goal number]`", parse_mode="Markdown"
        )
        return
    except PocketPalError as e:
        await update.message.reply_text(f"❌ Couldn't delete the goal: {e}")
        return

    await update.message.reply_text(f"🗑️ Goal '{goal.title}' deleted")
