from telegram import Update
from telegram.ext import ContextTypes
from telegram.helpers import escape_markdown

from pocketpal.bot.commands.utils import get_user_id
from pocketpal.core import aggregation, db
from pocketpal.core.errors import PocketPalError, ValidationError
from pocketpal.core.splits import outstanding_amount
from pocketpal.utils.text_utils import format_money


def _pick_split(splits, raw_number: str):
    if not raw_number.isdigit() or not 1 <= int(raw_number) <= len(splits):
        raise ValidationError(f"Split number must be between 1 and {len(splits)}")
    return splits[int(raw_number) - 1]


async def splits_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Lists split expenses with who has paid."""
    supabase_client = context.bot_data["supabase_client"]
    try:
        splits = db.get_splits(supabase_client, get_user_id(update))
    except PocketPalError as e:
        await update.message.reply_text(f"❌ Couldn't load your splits: {e}")
        return

    if not splits:
        await update.message.reply_text("No splits yet. Start one with /split 🧾")
        return

    tz = context.bot_data["tz"]
    lines = []
    for number, split in enumerate(splits, start=1):
        created = aggregation.local_date(split.created_at, tz)
        lines.append(
            f"{number}. {split.title}: {format_money(split.total_amount)} "
            f"({split.paid_count}/{len(split.participants)} paid, "
            f"{created.strftime('%b %d')})"
        )
        for participant in split.participants:
            mark = "✅" if participant.is_paid else "⏳"
            lines.append(f"   {mark} {participant.name}: {format_money(participant.amount)}")
        owed = outstanding_amount(split)
        if owed > 0:
            lines.append(f"   Still owed: {format_money(owed)}")
    await update.message.reply_text("\n".join(lines))


async def paid_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Toggles a participant's paid flag: /paid [split number] [name]."""
    supabase_client = context.bot_data["supabase_client"]
    args = context.args or []
    try:
        if len(args) < 2:
            raise ValidationError("Please give the split number and a name")
        splits = db.get_splits(supabase_client, get_user_id(update))
        split = _pick_split(splits, args[0])
        name = " ".join(args[1:]).strip().lower()
        participant = next((p for p in split.participants if p.name.lower() == name), None)
        if participant is None:
            raise ValidationError(f"No one called '{name}' in {split.title}")
        db.set_participant_paid(supabase_client, participant.id, not participant.is_paid)
    except ValidationError as e:
        await update.message.reply_text(
            f"⚠️ {escape_markdown(str(e))}\nUsage: `/paid [split number] [name]`", parse_mode="Markdown"
        )
        return
    except PocketPalError as e:
        await update.message.reply_text(f"❌ Couldn't update the split: {e}")
        return

    status = "unpaid" if participant.is_paid else "paid"
    await update.message.reply_text(f"👍 {participant.name} marked as {status} for {split.title}.")


async def delete_split_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Deletes a split together with its participants."""
    supabase_client = context.bot_data["supabase_client"]
    args = context.args or []
    try:
        if not args:
            raise ValidationError("Which split? Use the number from /splits")
        splits = db.get_splits(supabase_client, get_user_id(update))
        split = _pick_split(splits, args[0])
        db.delete_split(supabase_client, split.id)
    except ValidationError as e:
        await update.message.reply_text(
            f"⚠️ {escape_markdown(str(e))}\nUsage: `/deletesplit [split number]`", parse_mode="Markdown"
        )
        return
    except PocketPalError as e:
        await update.message.reply_text(f"❌ Couldn't delete the split: {e}")
        return

    await update.message.reply_text(f"🗑️ Split expense '{split.title}' deleted")
