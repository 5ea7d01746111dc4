"""Transcription API adapter - sends recorded audio for speech-to-text."""

import base64
import logging

import requests

from braindump.adapters.brain_dump_api import AuthenticationError, BrainDumpAPIAdapter
from braindump.config import Config, Tokens, load_config
from braindump.errors import TranscriptionFailed

logger = logging.getLogger(__name__)

TRANSCRIBE_ENDPOINT = "/voice-to-text"


class TranscriptionAPIAdapter:
    """
    Remote transcription adapter.

    Implements Transcriber protocol. Audio travels base64-encoded in a JSON
    body. Authentication goes through the brain-dump API adapter, so an
    expired access token is refreshed before the upload.
    """

    def __init__(
        self,
        config: Config | None = None,
        tokens: Tokens | None = None,
        timeout: float | None = None,
        auth: BrainDumpAPIAdapter | None = None,
    ):
        self.config = config or load_config()
        self.tokens = tokens or Tokens.load()
        self.timeout = timeout
        self.auth = auth or BrainDumpAPIAdapter(self.config, self.tokens)
        self._session = requests.Session()

    def transcribe(self, audio: bytes, language: str = "auto") -> str:
        """Return the transcription of audio."""
        if not audio:
            raise TranscriptionFailed("Nothing was recorded.")

        try:
            headers = self.auth.auth_headers()
            resp = self._session.post(
                f"{self.config.api_base_url}{TRANSCRIBE_ENDPOINT}",
                json={
                    "audio": base64.b64encode(audio).decode("ascii"),
                    "language": language,
                },
                headers=headers,
                timeout=self.timeout,
            )
        except AuthenticationError as e:
            raise TranscriptionFailed(str(e)) from e
        except requests.RequestException as e:
            logger.error(f"Transcription request failed: {e}")
            raise TranscriptionFailed() from e

        if not resp.ok:
            logger.error(f"Transcription failed with status {resp.status_code}")
            raise TranscriptionFailed()

        try:
            data = resp.json()
        except ValueError as e:
            raise TranscriptionFailed() from e

        text = data.get("transcription")
        if text is None:
            text = data.get("text", "")
        return str(text or "").strip()
