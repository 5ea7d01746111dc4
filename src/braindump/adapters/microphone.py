"""Microphone recorder adapter - push-to-talk capture via sounddevice."""

import io
import logging
import threading
import wave

logger = logging.getLogger(__name__)

SAMPLE_RATE = 16000
FRAME_SAMPLES = 320  # 20 ms at 16 kHz


class MicrophoneRecorder:
    """
    Push-to-talk microphone recorder.

    Implements AudioRecorder protocol. Frames are buffered in memory as
    16-bit mono PCM and handed back as a WAV blob by finish().
    """

    def __init__(self, device: int | str | None = None, sample_rate: int = SAMPLE_RATE):
        self.device = device
        self.sample_rate = sample_rate
        self._stream = None
        self._frames: list[bytes] = []
        self._lock = threading.Lock()

    @property
    def active(self) -> bool:
        return self._stream is not None

    def start(self) -> None:
        """Open the input stream and start buffering frames."""
        # Imported lazily: sounddevice needs PortAudio at import time.
        import numpy as np
        import sounddevice as sd

        if self._stream is not None:
            return

        def callback(indata, _frames, _time_info, status):
            if status:
                logger.debug(f"Microphone status: {status}")
            frame = indata[:, 0].astype(np.float32)
            pcm16 = np.clip(frame * 32768.0, -32768, 32767).astype(np.int16)
            with self._lock:
                self._frames.append(pcm16.tobytes())

        with self._lock:
            self._frames = []
        stream = sd.InputStream(
            samplerate=self.sample_rate,
            channels=1,
            dtype="float32",
            blocksize=FRAME_SAMPLES,
            device=self.device,
            callback=callback,
        )
        stream.start()
        self._stream = stream
        logger.debug("Microphone recording started")

    def finish(self) -> bytes:
        """Stop capturing and return the buffered audio as WAV."""
        if self._stream is not None:
            self._stream.stop()

        with self._lock:
            pcm = b"".join(self._frames)
            self._frames = []

        buf = io.BytesIO()
        with wave.open(buf, "wb") as wf:
            wf.setnchannels(1)
            wf.setsampwidth(2)
            wf.setframerate(self.sample_rate)
            wf.writeframes(pcm)
        return buf.getvalue()

    def release(self) -> None:
        """Close the input stream."""
        stream, self._stream = self._stream, None
        if stream is not None:
            stream.close()
            logger.debug("Microphone released")
