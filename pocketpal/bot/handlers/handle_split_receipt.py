from telegram import Update
from telegram.ext import ContextTypes

from pocketpal.bot.commands.utils import get_user_id
from pocketpal.bot.handlers import ASKING_SPLIT_CONFIRMATION, ASKING_SPLIT_RECEIPT, PENDING_SPLIT_KEY
from pocketpal.bot.handlers.aux import send_split_summary
from pocketpal.core import db
from pocketpal.core.errors import PocketPalError


async def handle_split_receipt(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    """Accepts a receipt photo or a skip, then asks for confirmation."""
    pending = context.user_data.setdefault(PENDING_SPLIT_KEY, {})

    if update.message.photo:
        photo_file = await update.message.photo[-1].get_file()
        data = await photo_file.download_as_bytearray()
        try:
            pending["receipt_url"] = db.upload_image(
                context.bot_data["supabase_client"],
                db.RECEIPTS_BUCKET,
                get_user_id(update),
                "receipt.jpg",
                bytes(data),
            )
        except PocketPalError:
            await update.message.reply_text(
                "😕 Couldn't upload the receipt. Send it again or tap Skip."
            )
            return ASKING_SPLIT_RECEIPT
    elif (update.message.text or "").strip().lower() == "skip":
        pending["receipt_url"] = None
    else:
        await update.message.reply_text("Send a photo of the receipt, or tap Skip.")
        return ASKING_SPLIT_RECEIPT

    await send_split_summary(update, pending)
    return ASKING_SPLIT_CONFIRMATION
