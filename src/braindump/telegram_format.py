"""Telegram message formatting utilities."""

import telegramify_markdown

from .core.pipeline import Workflow
from .core.render import format_review

# Telegram caps messages at 4096 characters.
MESSAGE_LIMIT = 4000


async def send_markdown(bot_or_msg, text: str, *, chat_id: int | None = None, reply_markup=None):
    """Send markdown text to Telegram, converting to MarkdownV2.

    bot_or_msg: a Bot instance (pass chat_id) or an Update.message (calls reply_text).
    The reply markup, if any, is attached to the last chunk.
    """
    converted = telegramify_markdown.markdownify(text)
    chunks = [converted[i : i + MESSAGE_LIMIT] for i in range(0, len(converted), MESSAGE_LIMIT)]
    for i, chunk in enumerate(chunks):
        markup = reply_markup if i == len(chunks) - 1 else None
        if chat_id is not None:
            await bot_or_msg.send_message(
                chat_id=chat_id, text=chunk, parse_mode="MarkdownV2", reply_markup=markup
            )
        else:
            await bot_or_msg.reply_text(chunk, parse_mode="MarkdownV2", reply_markup=markup)


def review_markdown(workflow: Workflow) -> str:
    """Review listing wrapped in a code block so the columns line up."""
    listing = format_review(workflow, details=False)
    if len(listing) > MESSAGE_LIMIT - 200:
        listing = listing[: MESSAGE_LIMIT - 200] + "\n..."
    return f"*Review your tasks*\n\n```\n{listing}\n```"
