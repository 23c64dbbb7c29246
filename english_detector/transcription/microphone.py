"""Microphone audio source for streaming recognition."""

import logging
import queue
from typing import Iterator, Optional

import pyaudio

logger = logging.getLogger(__name__)


class MicrophoneStream:
    """Opens a PyAudio input stream and yields raw 16-bit audio chunks."""

    def __init__(self,
                 sample_rate: int = 16000,
                 chunk_size: int = 1024,
                 channels: int = 1,
                 format: int = pyaudio.paInt16):
        """Initialize microphone stream.

        Args:
            sample_rate: Audio sample rate (16kHz for speech recognition)
            chunk_size: Size of each audio chunk in samples
            channels: Number of audio channels (1 for mono)
            format: Audio format (16-bit signed int)
        """
        self.sample_rate = sample_rate
        self.chunk_size = chunk_size
        self.channels = channels
        self.format = format

        self._buff: "queue.Queue[Optional[bytes]]" = queue.Queue()
        self._pyaudio_instance: Optional[pyaudio.PyAudio] = None
        self._stream = None
        self.closed = True
        self.total_chunks = 0

    def open(self) -> None:
        """Open the input device.

        Raises:
            OSError: If no input device is available or access is denied
        """
        self._pyaudio_instance = pyaudio.PyAudio()
        try:
            self._stream = self._pyaudio_instance.open(
                format=self.format,
                channels=self.channels,
                rate=self.sample_rate,
                input=True,
                frames_per_buffer=self.chunk_size,
                stream_callback=self._fill_buffer,
            )
        except Exception:
            self._pyaudio_instance.terminate()
            self._pyaudio_instance = None
            raise
        self.closed = False
        logger.info(f"Audio stream opened: {self.sample_rate}Hz, "
                    f"{self.chunk_size} samples/chunk")

    def close(self) -> None:
        """Close the input device and release any blocked consumer."""
        if self.closed:
            return
        self.closed = True
        if self._stream:
            self._stream.stop_stream()
            self._stream.close()
            self._stream = None
        if self._pyaudio_instance:
            self._pyaudio_instance.terminate()
            self._pyaudio_instance = None
        self._buff.put(None)
        logger.info(f"Audio stream closed. Total chunks: {self.total_chunks}")

    def _fill_buffer(self, in_data, frame_count, time_info, status_flags):
        self._buff.put(in_data)
        self.total_chunks += 1
        return None, pyaudio.paContinue

    def generator(self) -> Iterator[bytes]:
        """Yield audio chunks until the stream is closed."""
        while not self.closed:
            chunk = self._buff.get()
            if chunk is None:
                return
            yield chunk
