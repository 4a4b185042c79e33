import asyncio

from telegram import Update
from telegram.ext import ContextTypes

from pocketpal.core.content_clients import ContentState, InsightsClient

IMPACT_ICONS = {"positive": "📈", "negative": "📉"}
SENTIMENT_ICONS = {"bullish": "📈", "bearish": "📉"}


def _lesson_line(item) -> str:
    if item.related_lesson_id is None:
        return ""
    return f"\n   📚 Related lesson: {item.related_lesson_title}"


async def insights_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """AI money tips, optionally tailored: /insights [context]."""
    user_context = " ".join(context.args or []).strip() or None
    client = InsightsClient(context.bot_data["functions_transport"], user_context=user_context)
    insights = await asyncio.to_thread(client.load)

    if client.state is ContentState.FAILED:
        await update.message.reply_text(f"😕 {client.notice}")
        return
    if not insights:
        await update.message.reply_text("No insights right now. Try again in a bit!")
        return

    lines = ["✨ Money insights for you:"]
    for insight in insights:
        icon = IMPACT_ICONS.get(insight.impact, "💡")
        lines.append(f"\n{icon} {insight.title}\n   {insight.summary}{_lesson_line(insight)}")
    await update.message.reply_text("\n".join(lines))


async def news_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Financial news explained. `/news refresh` skips the cache."""
    client = context.bot_data["news_client"]
    refresh = bool(context.args) and context.args[0].lower() == "refresh"
    news = await asyncio.to_thread(client.refresh if refresh else client.load)

    if client.state is ContentState.FAILED and not news:
        await update.message.reply_text(f"😕 {client.notice}")
        return
    if not news:
        await update.message.reply_text("No news right now. Try again in a bit!")
        return

    lines = ["📰 Financial news:"]
    if client.notice:
        lines.append(f"({client.notice})")
    for item in news:
        icon = SENTIMENT_ICONS.get(item.sentiment, "➖")
        topic = f" [{item.related_topic}]" if item.related_topic else ""
        lines.append(f"\n{icon} {item.headline}{topic}\n   {item.summary}{_lesson_line(item)}")
    await update.message.reply_text("\n".join(lines))
