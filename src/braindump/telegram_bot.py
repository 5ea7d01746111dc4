"""Braindump Telegram Bot."""

import logging
from functools import partial

from telegram import Update
from telegram.ext import (
    Application,
    CallbackQueryHandler,
    CommandHandler,
    ConversationHandler,
    MessageHandler,
    filters,
)
from apscheduler.schedulers.asyncio import AsyncIOScheduler

from .adapters.scheduler_timer import SchedulerTimer
from .config import Config, load_config
from .telegram_handlers import (
    capture_text_handler,
    capture_voice_handler,
    clear_handler,
    dump_cancel_handler,
    dump_start_handler,
    edit_done_handler,
    edit_text_handler,
    help_handler,
    process_handler,
    review_callback_handler,
    show_handler,
    start_handler,
)
from .telegram_states import DumpStates
from .workflows import build_session

logger = logging.getLogger(__name__)


class AuthFilter(filters.BaseFilter):
    """Filter to only allow authorized users."""

    def __init__(self, allowed_users: list[int]):
        super().__init__()
        self.allowed_users = allowed_users

    def check_update(self, update: Update) -> bool:
        if not self.allowed_users:
            return True  # No restriction if no users configured
        user = update.effective_user
        if user is None:
            return False
        return user.id in self.allowed_users


def create_application(config: Config | None = None, scheduler: AsyncIOScheduler | None = None) -> Application:
    """Create and configure the Telegram bot application."""
    if config is None:
        config = load_config()

    if not config.telegram_bot_token:
        raise ValueError(
            "TELEGRAM_BOT_TOKEN not configured. "
            "Get a token from @BotFather on Telegram and add it to braindump.conf"
        )

    if scheduler is None:
        scheduler = AsyncIOScheduler(timezone=config.timezone or "UTC")

    # Build application
    app = Application.builder().token(config.telegram_bot_token).build()
    app.bot_data["session_factory"] = partial(
        build_session, config, SchedulerTimer(scheduler), voice=False
    )

    # Create auth filter
    auth_filter = AuthFilter(config.telegram_allowed_users)

    # Simple commands (with auth filter)
    app.add_handler(CommandHandler("start", start_handler, filters=auth_filter))
    app.add_handler(CommandHandler("help", help_handler, filters=auth_filter))

    capture_handlers = [
        MessageHandler(auth_filter & filters.TEXT & ~filters.COMMAND, capture_text_handler),
        MessageHandler(auth_filter & (filters.VOICE | filters.AUDIO), capture_voice_handler),
        CommandHandler("show", show_handler, filters=auth_filter),
        CommandHandler("clear", clear_handler, filters=auth_filter),
        CommandHandler("process", process_handler, filters=auth_filter),
    ]

    # Brain dump conversation handler (multi-step)
    dump_conv = ConversationHandler(
        entry_points=[CommandHandler("dump", dump_start_handler, filters=auth_filter)],
        states={
            DumpStates.CAPTURE: [
                *capture_handlers,
                CallbackQueryHandler(review_callback_handler),
            ],
            DumpStates.REVIEW: [
                CallbackQueryHandler(review_callback_handler),
                *capture_handlers,
            ],
            DumpStates.EDIT: [
                CommandHandler("done", edit_done_handler, filters=auth_filter),
                MessageHandler(auth_filter & filters.TEXT & ~filters.COMMAND, edit_text_handler),
            ],
        },
        fallbacks=[CommandHandler("cancel", dump_cancel_handler)],
        per_user=True,
    )
    app.add_handler(dump_conv)

    # Handle unauthorized access attempts
    async def unauthorized_handler(update: Update, context):
        user = update.effective_user
        logger.warning(f"Unauthorized access attempt from user {user.id} ({user.username})")
        await update.message.reply_text(
            "Unauthorized. This bot is private.\n"
            "If you're the owner, add your Telegram user ID to TELEGRAM_ALLOWED_USERS in braindump.conf"
        )

    # Add catch-all for unauthorized users if we have an allowlist
    if config.telegram_allowed_users:
        app.add_handler(
            MessageHandler(~auth_filter & filters.ALL, unauthorized_handler)
        )

    return app


def run_bot():
    """Run the Telegram bot."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.INFO,
    )

    config = load_config()
    scheduler = AsyncIOScheduler(timezone=config.timezone or "UTC")
    app = create_application(config, scheduler)

    async def post_init(application: Application) -> None:
        """Start scheduler after event loop is running."""
        scheduler.start()
        logger.info("Scheduler started")

    async def post_shutdown(application: Application) -> None:
        scheduler.shutdown(wait=False)

    app.post_init = post_init
    app.post_shutdown = post_shutdown

    # Log startup info
    if config.telegram_allowed_users:
        logger.info(f"Bot authorized for users: {config.telegram_allowed_users}")
    else:
        logger.warning("No TELEGRAM_ALLOWED_USERS configured - bot is open to anyone!")

    logger.info("Starting braindump Telegram bot...")

    # Run bot
    app.run_polling(allowed_updates=Update.ALL_TYPES)
