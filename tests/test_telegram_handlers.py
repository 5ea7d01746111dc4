"""Tests for the Telegram brain-dump conversation."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from braindump.telegram_bot import AuthFilter
from braindump.telegram_handlers import (
    capture_text_handler,
    dump_cancel_handler,
    process_handler,
    review_callback_handler,
    review_keyboard,
)
from braindump.telegram_states import DumpStates
from braindump.workflows import BrainDumpSession

from conftest import FakeCommitter, FakeExtractor

CONTENT = "Finish the quarterly report and call the dentist"


@pytest.fixture
def session(sample_result, timer):
    return BrainDumpSession(FakeExtractor([sample_result]), FakeCommitter(), timer, identity="user-1")


@pytest.fixture
def context(session):
    context = MagicMock()
    context.user_data = {"session": session}
    context.bot_data = {}
    return context


def _message_update(text=""):
    update = MagicMock()
    update.message.text = text
    update.message.reply_text = AsyncMock()
    update.callback_query = None
    return update


def _callback_update(data):
    update = MagicMock()
    update.callback_query.data = data
    update.callback_query.answer = AsyncMock()
    update.callback_query.edit_message_text = AsyncMock()
    return update


class TestCapture:
    def test_text_appends(self, session, context):
        update = _message_update("call the dentist")
        state = asyncio.run(capture_text_handler(update, context))
        assert state == DumpStates.CAPTURE
        assert session.buffer.text == "call the dentist"

    def test_session_created_on_demand(self, session):
        context = MagicMock()
        context.user_data = {}
        context.bot_data = {"session_factory": lambda: session}
        asyncio.run(capture_text_handler(_message_update("renew passport"), context))
        assert context.user_data["session"] is session


class TestProcess:
    def test_moves_to_review(self, session, context):
        session.set_text(CONTENT)
        update = _message_update("/process")
        update.message.reply_text = AsyncMock()

        state = asyncio.run(process_handler(update, context))
        assert state == DumpStates.REVIEW
        assert len(session.review.tasks) == 3

    def test_error_stays_in_capture(self, session, context):
        update = _message_update("/process")
        state = asyncio.run(process_handler(update, context))
        assert state == DumpStates.CAPTURE
        update.message.reply_text.assert_awaited_with("Please enter some thoughts before organizing them.")


class TestReview:
    @pytest.fixture
    def reviewing(self, session):
        session.set_text(CONTENT)
        asyncio.run(session.extract())
        return session

    def test_toggle(self, reviewing, context):
        state = asyncio.run(review_callback_handler(_callback_update("toggle:2"), context))
        assert state == DumpStates.REVIEW
        assert not reviewing.review.is_selected("2")

    def test_toggle_unknown_task(self, reviewing, context):
        asyncio.run(review_callback_handler(_callback_update("toggle:missing"), context))
        assert reviewing.review.all_selected

    def test_select_all(self, reviewing, context):
        asyncio.run(review_callback_handler(_callback_update("all"), context))
        assert reviewing.review.selection == set()

    def test_save(self, reviewing, context):
        update = _callback_update("save")
        state = asyncio.run(review_callback_handler(update, context))
        assert state == DumpStates.CAPTURE
        assert len(reviewing.committer.calls) == 1
        assert "Saved 3 tasks" in update.callback_query.edit_message_text.await_args.args[0]

    def test_save_nothing_selected(self, reviewing, context):
        reviewing.review.toggle_all()
        update = _callback_update("save")
        state = asyncio.run(review_callback_handler(update, context))
        assert state == DumpStates.REVIEW
        assert update.callback_query.answer.await_args.kwargs["show_alert"] is True

    def test_keyboard(self, reviewing):
        reviewing.review.toggle("1")
        rows = review_keyboard(reviewing).inline_keyboard
        assert rows[0][0].text.startswith("⬜")
        assert rows[0][0].callback_data == "toggle:1"
        assert rows[1][1].callback_data == "edit:2"
        assert rows[-1][0].text == "💾 Save 2 tasks"


def test_cancel_closes_session(session, context):
    state = asyncio.run(dump_cancel_handler(_message_update("/cancel"), context))
    assert state == -1
    assert "session" not in context.user_data


class TestAuthFilter:
    def test_open_when_unconfigured(self):
        assert AuthFilter([]).check_update(MagicMock())

    def test_allowlist(self):
        update = MagicMock()
        update.effective_user.id = 42
        assert AuthFilter([42]).check_update(update)
        assert not AuthFilter([7]).check_update(update)
