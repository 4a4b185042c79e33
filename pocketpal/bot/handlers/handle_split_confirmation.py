from telegram import ReplyKeyboardMarkup, ReplyKeyboardRemove, Update
from telegram.ext import ContextTypes, ConversationHandler

from pocketpal.bot.commands.utils import get_user_id
from pocketpal.bot.handlers import ASKING_SPLIT_CONFIRMATION, PENDING_SPLIT_KEY
from pocketpal.core import db
from pocketpal.core.errors import PocketPalError, ValidationError
from pocketpal.core.splits import build_split
from pocketpal.utils.text_utils import format_money


async def handle_split_confirmation(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    """Saves the pending split on Yes, drops it on No."""
    user_response = update.message.text.strip().lower()
    pending = context.user_data.get(PENDING_SPLIT_KEY)

    if not pending:
        await update.message.reply_text(
            "Oops! 😬 There's no split waiting for confirmation. Start again with /split.",
            reply_markup=ReplyKeyboardRemove(),
        )
        return ConversationHandler.END

    if user_response in ("yes ✅", "yes"):
        try:
            split = build_split(
                get_user_id(update),
                pending.get("title", ""),
                zip(pending.get("names", []), pending.get("amounts", [])),
                description=pending.get("description"),
                receipt_url=pending.get("receipt_url"),
            )
            saved = db.create_split(context.bot_data["supabase_client"], split)
        except ValidationError as e:
            await update.message.reply_text(f"⚠️ {e}", reply_markup=ReplyKeyboardRemove())
            context.user_data.pop(PENDING_SPLIT_KEY, None)
            return ConversationHandler.END
        except PocketPalError as e:
            await update.message.reply_text(
                f"❌ Failed to create split expense: {e}", reply_markup=ReplyKeyboardRemove()
            )
            context.user_data.pop(PENDING_SPLIT_KEY, None)
            return ConversationHandler.END

        context.user_data.pop(PENDING_SPLIT_KEY, None)
        await update.message.reply_text(
            f"🎉 Split expense created!\n{saved.title}: {format_money(saved.total_amount)} "
            f"between {len(saved.participants)} people. Track it with /splits.",
            reply_markup=ReplyKeyboardRemove(),
        )
        return ConversationHandler.END

    if user_response in ("no ❌", "no"):
        context.user_data.pop(PENDING_SPLIT_KEY, None)
        await update.message.reply_text(
            "No problem, nothing was saved. Start over with /split.",
            reply_markup=ReplyKeyboardRemove(),
        )
        return ConversationHandler.END

    reply_markup = ReplyKeyboardMarkup([["Yes ✅", "No ❌"]], one_time_keyboard=True, resize_keyboard=True)
    await update.message.reply_text("Please answer 'Yes ✅' or 'No ❌'.", reply_markup=reply_markup)
    return ASKING_SPLIT_CONFIRMATION
