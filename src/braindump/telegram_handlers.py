"""Telegram command handlers."""

import logging

import telegramify_markdown
from telegram import InlineKeyboardButton, InlineKeyboardMarkup, Update
from telegram.ext import ContextTypes, ConversationHandler

from .core.render import format_task_details, format_time_mentions
from .errors import BrainDumpError, RateLimited
from .telegram_format import review_markdown, send_markdown
from .telegram_states import DumpStates
from .workflows import BrainDumpSession

logger = logging.getLogger(__name__)

# Inline button titles are cut to fit on a phone screen.
BUTTON_TITLE_LIMIT = 32


# ============== Simple Commands ==============


async def start_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /start command."""
    await update.message.reply_text(
        "Hey! Send me everything on your mind and I'll turn it into tasks.\n\n"
        "Commands:\n"
        "/dump - Start a brain dump\n"
        "/help - Show all commands"
    )


async def help_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /help command."""
    await send_markdown(
        update.message,
        "*braindump Commands*\n\n"
        "/dump - Start a brain dump (send text or voice notes)\n"
        "/show - Show what you've captured so far\n"
        "/process - Organize your thoughts into tasks\n"
        "/clear - Start over with an empty dump\n"
        "/cancel - End the brain dump\n",
    )


# ============== Session helpers ==============


def get_session(context: ContextTypes.DEFAULT_TYPE) -> BrainDumpSession:
    """The user's session, created on first use."""
    session = context.user_data.get("session")
    if session is None:
        factory = context.bot_data["session_factory"]
        session = factory()
        context.user_data["session"] = session
    return session


def close_session(context: ContextTypes.DEFAULT_TYPE) -> None:
    session = context.user_data.pop("session", None)
    if session is not None:
        session.close()


def _button_title(title: str) -> str:
    if len(title) <= BUTTON_TITLE_LIMIT:
        return title
    return title[: BUTTON_TITLE_LIMIT - 1] + "…"


def review_keyboard(session: BrainDumpSession) -> InlineKeyboardMarkup:
    """One toggle and one edit button per task, then bulk actions."""
    review = session.review
    keyboard = []
    for task in review.tasks:
        mark = "✅" if review.is_selected(task.id) else "⬜"
        keyboard.append(
            [
                InlineKeyboardButton(
                    f"{mark} {_button_title(task.title)}", callback_data=f"toggle:{task.id}"
                ),
                InlineKeyboardButton("✏️", callback_data=f"edit:{task.id}"),
            ]
        )
    keyboard.append(
        [
            InlineKeyboardButton(
                "Deselect all" if review.all_selected else "Select all", callback_data="all"
            ),
            InlineKeyboardButton("Add more", callback_data="more"),
        ]
    )
    keyboard.append(
        [InlineKeyboardButton(f"💾 Save {len(review.selection)} tasks", callback_data="save")]
    )
    return InlineKeyboardMarkup(keyboard)


async def _show_review(query, session: BrainDumpSession) -> None:
    await query.edit_message_text(
        telegramify_markdown.markdownify(review_markdown(session.workflow)),
        parse_mode="MarkdownV2",
        reply_markup=review_keyboard(session),
    )


# ============== Brain Dump Conversation ==============


async def dump_start_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Start (or resume) a brain dump."""
    session = get_session(context)
    if session.buffer.is_empty:
        await update.message.reply_text(
            "What's on your mind? Send text or voice notes, as many as you like.\n"
            "Send /process when you're done."
        )
    else:
        await update.message.reply_text(
            f"Picking up where you left off ({session.buffer.word_count} words).\n"
            "Keep going, or send /process."
        )
    return DumpStates.CAPTURE


async def capture_text_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Append a text message to the dump."""
    text = update.message.text.strip()
    if not text:
        return DumpStates.CAPTURE

    session = get_session(context)
    session.append_text(text)
    await update.message.reply_text(f"Noted. {session.buffer.word_count} words so far.")
    return DumpStates.CAPTURE


async def capture_voice_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Transcribe a voice note and append it to the dump."""
    session = get_session(context)
    voice = update.message.voice or update.message.audio

    await update.message.reply_text("Transcribing...")
    try:
        file = await voice.get_file()
        audio = bytes(await file.download_as_bytearray())
        text = await session.add_recording(audio)
    except BrainDumpError as e:
        await update.message.reply_text(e.message)
        return DumpStates.CAPTURE

    if not text.strip():
        await update.message.reply_text("I couldn't hear anything in that one.")
    else:
        await update.message.reply_text(f"“{text.strip()}”")
    return DumpStates.CAPTURE


async def show_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Show the captured text."""
    session = get_session(context)
    if session.buffer.is_empty:
        await update.message.reply_text("Nothing captured yet.")
        return DumpStates.CAPTURE

    buffer = session.buffer
    lines = [buffer.text, "", f"_{buffer.word_count} words, {buffer.char_count} characters_"]
    mentions = session.time_mentions()
    if mentions:
        lines += ["", "*Times mentioned:*"] + format_time_mentions(mentions)
    await send_markdown(update.message, "\n".join(lines))
    return DumpStates.CAPTURE


async def clear_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Empty the dump."""
    get_session(context).set_text("")
    await update.message.reply_text("Cleared. What's on your mind?")
    return DumpStates.CAPTURE


async def process_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Extract tasks from the dump and show them for review."""
    session = get_session(context)
    await update.message.reply_text("Organizing your thoughts...")

    try:
        result = await session.extract()
    except RateLimited as e:
        await update.message.reply_text(f"{e.message} (try again in {e.retry_after}s)")
        return DumpStates.CAPTURE
    except BrainDumpError as e:
        await update.message.reply_text(e.message)
        return DumpStates.CAPTURE

    if result is None:
        # A newer /process already took over this conversation.
        return DumpStates.REVIEW
    if result.is_empty:
        await update.message.reply_text(session.workflow.notice)
        return DumpStates.CAPTURE

    await send_markdown(
        update.message,
        review_markdown(session.workflow),
        reply_markup=review_keyboard(session),
    )
    return DumpStates.REVIEW


async def review_callback_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle taps on the review keyboard."""
    query = update.callback_query
    session = get_session(context)
    review = session.review
    data = query.data or ""

    if data.startswith("toggle:"):
        review.toggle(data[len("toggle:"):])
        await query.answer()
        await _show_review(query, session)
        return DumpStates.REVIEW

    if data == "all":
        review.toggle_all()
        await query.answer()
        await _show_review(query, session)
        return DumpStates.REVIEW

    if data.startswith("edit:"):
        task = review.get(data[len("edit:"):])
        if task is None:
            await query.answer("That task is gone.")
            return DumpStates.REVIEW
        review.begin_edit(task.id)
        await query.answer()
        details = "\n".join(line.strip() for line in format_task_details(task))
        await query.message.reply_text(
            f"Editing: {task.title}\n{details}\n\n"
            "Send a new title, or one of:\n"
            "priority: high\n"
            "hours: 1.5\n"
            "description: ...\n\n"
            "/done when finished."
        )
        return DumpStates.EDIT

    if data == "more":
        await query.answer()
        await query.edit_message_text("Keep going. Send /process again when you're done.")
        return DumpStates.CAPTURE

    if data == "save":
        count = len(review.selection)
        try:
            await session.commit()
        except BrainDumpError as e:
            await query.answer(e.message, show_alert=True)
            return DumpStates.REVIEW
        await query.answer()
        await query.edit_message_text(
            f"✓ Saved {count} tasks.\n\nSend more thoughts, /clear to start fresh, or /cancel."
        )
        return DumpStates.CAPTURE

    await query.answer()
    return DumpStates.REVIEW


async def edit_text_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Apply a field edit to the task being edited."""
    session = get_session(context)
    review = session.review
    task_id = review.editing_id
    if task_id is None:
        return DumpStates.REVIEW

    text = update.message.text.strip()
    field, sep, value = text.partition(":")
    field = field.strip().lower()
    if sep and field in ("priority", "hours", "description", "title"):
        name = "estimated_hours" if field == "hours" else field
        review.edit_field(task_id, name, value.strip())
    else:
        review.edit_field(task_id, "title", text)

    task = review.get(task_id)
    await update.message.reply_text(
        f"Updated: {task.title} [{task.priority.value}, {task.estimated_hours:g}h]\n"
        "More changes, or /done."
    )
    return DumpStates.EDIT


async def edit_done_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Leave edit mode and show the review again."""
    session = get_session(context)
    session.review.end_edit()
    await send_markdown(
        update.message,
        review_markdown(session.workflow),
        reply_markup=review_keyboard(session),
    )
    return DumpStates.REVIEW


async def dump_cancel_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """End the brain dump and discard the session."""
    close_session(context)
    await update.message.reply_text("Brain dump closed.")
    return ConversationHandler.END
