from telegram import ReplyKeyboardMarkup, Update
from telegram.ext import ContextTypes

from pocketpal.bot.handlers import ASKING_SPLIT_AMOUNTS, ASKING_SPLIT_RECEIPT, PENDING_SPLIT_KEY
from pocketpal.core.errors import ValidationError
from pocketpal.core.splits import split_evenly
from pocketpal.utils.text_utils import parse_amount

SKIP_RECEIPT = "Skip"


def _parse_amounts(text: str, names):
    """Either `even <total>` or one amount per name, comma separated."""
    text = text.strip()
    if text.lower().startswith("even"):
        try:
            total = parse_amount(text[4:], field="total")
        except ValidationError:
            raise ValidationError("Enter a total amount to split")
        shares = split_evenly(total, names)
        return [shares[name] for name in names]

    raw_amounts = [part for part in text.split(",") if part.strip()]
    if len(raw_amounts) != len(names):
        raise ValidationError(f"Send {len(names)} amounts, one per person")
    return [parse_amount(raw, field=f"amount for {name}") for raw, name in zip(raw_amounts, names)]


async def handle_split_amounts(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    pending = context.user_data.setdefault(PENDING_SPLIT_KEY, {})
    names = pending.get("names", [])
    try:
        amounts = _parse_amounts(update.message.text, names)
    except ValidationError as e:
        await update.message.reply_text(f"⚠️ {e}")
        return ASKING_SPLIT_AMOUNTS

    pending["amounts"] = [str(amount) for amount in amounts]
    reply_markup = ReplyKeyboardMarkup([[SKIP_RECEIPT]], one_time_keyboard=True, resize_keyboard=True)
    await update.message.reply_text(
        "Got a receipt? 📸 Send a photo of it, or tap Skip.",
        reply_markup=reply_markup,
    )
    return ASKING_SPLIT_RECEIPT
