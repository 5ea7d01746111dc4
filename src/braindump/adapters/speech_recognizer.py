"""Continuous speech recognizer adapter built on SpeechRecognition."""

import logging
from typing import Callable

logger = logging.getLogger(__name__)


class ContinuousSpeechRecognizer:
    """
    Continuous phrase recognizer.

    Implements SpeechRecognizer protocol. Listens on the default microphone
    in a background thread; every phrase it understands is reported as a
    final result.
    """

    def __init__(self, locale: str = "en-US", phrase_time_limit: float | None = 10.0):
        self.locale = locale
        self.phrase_time_limit = phrase_time_limit
        self._stop_listening: Callable | None = None

    @property
    def active(self) -> bool:
        return self._stop_listening is not None

    def start(self, on_result: Callable[[str, bool], None]) -> None:
        """Start listening in the background."""
        # Imported lazily: Microphone needs PyAudio.
        import speech_recognition as sr

        if self._stop_listening is not None:
            return

        recognizer = sr.Recognizer()
        microphone = sr.Microphone()
        with microphone as source:
            recognizer.adjust_for_ambient_noise(source, duration=0.5)

        def callback(rec, audio):
            try:
                text = rec.recognize_google(audio, language=self.locale)
            except sr.UnknownValueError:
                logger.debug("Speech not understood, skipping phrase")
                return
            except sr.RequestError as e:
                logger.warning(f"Speech recognition request failed: {e}")
                return
            if text:
                on_result(text, True)

        self._stop_listening = recognizer.listen_in_background(
            microphone, callback, phrase_time_limit=self.phrase_time_limit
        )
        logger.debug(f"Listening for speech ({self.locale})")

    def stop(self) -> None:
        """Stop the background listener and free the microphone."""
        stop, self._stop_listening = self._stop_listening, None
        if stop is not None:
            stop(wait_for_stop=False)
            logger.debug("Speech recognizer stopped")
