from decimal import Decimal
from typing import Any, Dict

from telegram import ReplyKeyboardMarkup, Update

from pocketpal.utils.text_utils import format_money


async def send_split_summary(update: Update, pending: Dict[str, Any]) -> None:
    """Shows the split about to be saved with a Yes/No keyboard."""
    amounts = [Decimal(amount) for amount in pending.get("amounts", [])]
    lines = [f"Create this split? 🧾\n📝 {pending.get('title')}"]
    if pending.get("description"):
        lines.append(f"💬 {pending['description']}")
    for name, amount in zip(pending.get("names", []), amounts):
        lines.append(f"👤 {name}: {format_money(amount)}")
    lines.append(f"💰 Total: {format_money(sum(amounts, Decimal('0')))}")
    if pending.get("receipt_url"):
        lines.append("📸 Receipt attached")

    keyboard = [["Yes ✅", "No ❌"]]
    reply_markup = ReplyKeyboardMarkup(keyboard, one_time_keyboard=True, resize_keyboard=True)
    await update.message.reply_text("\n".join(lines) + "\n\nAll good? 🤔", reply_markup=reply_markup)
