"""Google Speech-to-Text streaming engine."""

import asyncio
import logging
import threading
from typing import Any, Callable, Iterable, Optional, Protocol

from google.api_core import exceptions as gax_exceptions
from google.cloud import speech
from google.oauth2 import service_account

from .base import AbstractSpeechEngine, ErrorCallback, TextCallback

logger = logging.getLogger(__name__)


class AudioSource(Protocol):
    def open(self) -> None: ...
    def close(self) -> None: ...
    def generator(self) -> Iterable[bytes]: ...


class GoogleStreamingEngine(AbstractSpeechEngine):
    """Streaming recognition over Google Speech-to-Text.

    Recognition runs on a background thread; every event is handed to the
    asyncio loop that called start(), so handlers run on that loop.
    """

    def __init__(self,
                 credentials_path: Optional[str] = None,
                 language: str = "en-US",
                 sample_rate: int = 16000,
                 chunk_size: int = 1024,
                 interim_results: bool = True,
                 enable_automatic_punctuation: bool = True,
                 audio_source_factory: Optional[Callable[[], AudioSource]] = None,
                 client: Optional[Any] = None):
        """Initialize Google streaming engine.

        Args:
            credentials_path: Path to Google Cloud service account JSON file
                (required unless `client` is given)
            language: Language code (e.g., 'en-US')
            sample_rate: Sample rate of the audio source in Hz
            chunk_size: Samples per audio chunk for the default microphone source
            interim_results: Emit partial results while speech is in progress
            enable_automatic_punctuation: Enable automatic punctuation
            audio_source_factory: Creates the audio source; defaults to the microphone
            client: Pre-built SpeechClient
        """
        if not credentials_path and client is None:
            raise ValueError("Google credentials path is required - cannot initialize without credentials")
        self.credentials_path = credentials_path
        self.language = language
        self.sample_rate = sample_rate
        self.chunk_size = chunk_size
        self.client = client
        self.audio_source_factory = audio_source_factory or self._default_audio_source
        self.service_name = "Google Speech-to-Text"

        self.streaming_config = speech.StreamingRecognitionConfig(
            config=speech.RecognitionConfig(
                encoding=speech.RecognitionConfig.AudioEncoding.LINEAR16,
                sample_rate_hertz=sample_rate,
                language_code=language,
                enable_automatic_punctuation=enable_automatic_punctuation,
            ),
            interim_results=interim_results,
        )

        self._partial_callback: Optional[TextCallback] = None
        self._final_callback: Optional[TextCallback] = None
        self._error_callback: Optional[ErrorCallback] = None

        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._source: Optional[AudioSource] = None
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        self.is_streaming = False

    def on_partial(self, callback: TextCallback) -> None:
        self._partial_callback = callback

    def on_final(self, callback: TextCallback) -> None:
        self._final_callback = callback

    def on_error(self, callback: ErrorCallback) -> None:
        self._error_callback = callback

    async def start(self) -> None:
        """Open credentials and audio source, then start the recognition thread."""
        if self.is_streaming:
            logger.warning("Streaming already in progress")
            return

        self._loop = asyncio.get_running_loop()
        if self.client is None:
            self.client = await self._loop.run_in_executor(None, self._create_client)

        source = self.audio_source_factory()
        await self._loop.run_in_executor(None, source.open)

        self._source = source
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._stream_loop, args=(source, self._stop_event), daemon=True
        )
        self._thread.name = "GoogleStreamingThread"
        self._thread.start()
        self.is_streaming = True
        logger.info(f"{self.service_name} streaming started ({self.language})")

    def stop(self) -> None:
        """Stop streaming without waiting for the recognition thread."""
        if not self.is_streaming:
            return
        self.is_streaming = False
        self._stop_event.set()
        if self._source:
            self._source.close()
            self._source = None
        logger.info(f"{self.service_name} streaming stopped")

    def _create_client(self):
        logger.info(f"Loading Google credentials from: {self.credentials_path}")
        credentials = service_account.Credentials.from_service_account_file(self.credentials_path)
        logger.info(f"Using Google Cloud project: {credentials.project_id}")
        return speech.SpeechClient(credentials=credentials)

    def _default_audio_source(self) -> AudioSource:
        from .microphone import MicrophoneStream
        return MicrophoneStream(sample_rate=self.sample_rate, chunk_size=self.chunk_size)

    def _stream_loop(self, source: AudioSource, stop_event: threading.Event) -> None:
        """Internal method: run streaming recognition in the background thread."""
        requests = (
            speech.StreamingRecognizeRequest(audio_content=chunk)
            for chunk in source.generator()
        )
        try:
            responses = self.client.streaming_recognize(config=self.streaming_config, requests=requests)
            self.route_responses(responses, stop_event)
        except gax_exceptions.GoogleAPICallError as e:
            self._report_error(e, stop_event)
        except Exception as e:
            logger.error(f"Unexpected error in streaming thread: {e}", exc_info=True)
            self._report_error(e, stop_event)
        finally:
            logger.debug("Streaming thread exiting")

    def route_responses(self, responses: Iterable[Any], stop_event: threading.Event) -> None:
        """Turn streaming responses into partial and final events.

        Final results are emitted one by one; the remaining interim results of a
        response are concatenated into a single partial.
        """
        for response in responses:
            if stop_event.is_set():
                break
            pending = []
            for result in response.results:
                if not result.alternatives:
                    continue
                transcript = result.alternatives[0].transcript
                if result.is_final:
                    logger.debug(f"FINAL: '{transcript}'")
                    self._dispatch(self._final_callback, transcript)
                else:
                    pending.append(transcript)
            if pending:
                self._dispatch(self._partial_callback, "".join(pending))

    def _report_error(self, error: BaseException, stop_event: threading.Event) -> None:
        if stop_event.is_set():
            logger.debug(f"Ignoring streaming error after stop: {error}")
            return
        logger.error(f"{self.service_name} streaming error: {error}")
        self._dispatch(self._error_callback, error)

    def _dispatch(self, callback: Optional[Callable[[Any], None]], arg: Any) -> None:
        if callback is None or self._loop is None:
            return
        try:
            self._loop.call_soon_threadsafe(callback, arg)
        except RuntimeError as e:
            logger.warning(f"Event loop closed, dropping engine event: {e}")
