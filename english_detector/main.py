"""Main application entry point for the English detector."""

import sys
import asyncio
import argparse
import logging
import threading
from pathlib import Path
from typing import Optional

from . import __version__
from .analysis import LanguageAnalysisClient
from .config import DetectorConfig, DEFAULT_CONFIG_FILE
from .models.session import SessionSnapshot, SessionStatus
from .services import SpeechSession
from .transcription import GoogleStreamingEngine, StatePublisher
from .ui import SessionScreen

logger = logging.getLogger(__name__)


class App:
    """Wires engine, analysis client, session and screen for one run."""

    def __init__(self, config_path: str, log_level: Optional[str] = None):
        self.config = DetectorConfig(config_path)
        setup_logging(self.config, log_level or self.config.get('logging.level', 'INFO'))
        self._ended: Optional[asyncio.Event] = None
        self._stop_key_thread: Optional[threading.Thread] = None

    def init(self) -> None:
        logger.info("Initializing services...")

        self.engine = GoogleStreamingEngine(
            credentials_path=self.config.get_google_credentials_path(),
            language=self.config.get('engine.language', 'en-US'),
            sample_rate=self.config.get('engine.sample_rate', 16000),
            chunk_size=self.config.get('engine.chunk_size', 1024),
            interim_results=self.config.get('engine.interim_results', True),
        )
        self.client = LanguageAnalysisClient(
            endpoint=self.config.get_analysis_endpoint(),
            timeout_seconds=self.config.get_analysis_timeout(),
        )
        self.publisher = StatePublisher()
        self.session = SpeechSession(self.engine, self.client.analyze, self.publisher)
        self.screen = SessionScreen(self.publisher)

    async def run(self, duration: Optional[float] = None) -> SessionStatus:
        """Record until `duration` elapses (or Enter is pressed), then analyze.

        Returns:
            Final session status
        """
        self._ended = asyncio.Event()
        self.publisher.subscribe(self._on_snapshot)
        try:
            with self.session, self.screen:
                if not await self.session.start():
                    return self.session.status

                if duration is not None:
                    asyncio.get_running_loop().call_later(duration, self._ended.set)
                else:
                    self._wait_for_enter(asyncio.get_running_loop())
                await self._ended.wait()

                await self.session.stop()
        finally:
            self.publisher.unsubscribe(self._on_snapshot)
        return self.session.status

    def _on_snapshot(self, snapshot: SessionSnapshot) -> None:
        # engine faults end the recording early
        if snapshot.status is SessionStatus.ERROR and self._ended is not None:
            self._ended.set()

    def _wait_for_enter(self, loop: asyncio.AbstractEventLoop) -> None:
        self.screen.console.print("Press Enter to stop listening and analyze.")
        # a blocked readline cannot be cancelled; the daemon thread dies with the process
        self._stop_key_thread = threading.Thread(
            target=self._read_stop_key, args=(loop,), name="StopKeyThread", daemon=True
        )
        self._stop_key_thread.start()

    def _read_stop_key(self, loop: asyncio.AbstractEventLoop) -> None:
        sys.stdin.readline()
        try:
            loop.call_soon_threadsafe(self._ended.set)
        except RuntimeError:
            logger.debug("Stop key pressed after the run ended")


def setup_logging(config: DetectorConfig, level: str = "INFO") -> None:
    """Set up logging configuration from YAML config."""
    log_file_path = config.get('logging.file_path', 'data/logs/english_detector.log')
    console_output = config.get('logging.console_output', True)

    log_dir = Path(log_file_path).parent
    log_dir.mkdir(parents=True, exist_ok=True)

    handlers = []

    # File handler - always write to file
    file_handler = logging.FileHandler(log_file_path)
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
    ))
    handlers.append(file_handler)

    # Console handler - only if enabled in config
    if console_output:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.WARNING)
        console_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
        handlers.append(console_handler)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(getattr(logging, level.upper()))
    for handler in handlers:
        root_logger.addHandler(handler)

    logger.info("=" * 50)
    logger.info("English detector starting up")
    logger.info(f"Log file: {log_file_path}")
    logger.info(f"Log level set to: {level}")
    logger.info("=" * 50)


def main() -> None:
    """Main entry point for the English detector."""
    parser = argparse.ArgumentParser(
        description="English detector - transcribe speech, then estimate how much of it is English"
    )

    parser.add_argument(
        "--config",
        type=str,
        default=DEFAULT_CONFIG_FILE,
        help=f"Path to configuration YAML file (default: {DEFAULT_CONFIG_FILE})"
    )

    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Set logging level (default: from config, else INFO)"
    )

    parser.add_argument(
        "--auto",
        action="store_true",
        help="Run in automatic mode: listen for the specified duration, then stop and analyze"
    )

    parser.add_argument(
        "--duration",
        type=int,
        default=10,
        help="Duration in seconds for auto mode listening (default: 10)"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"English detector v{__version__}"
    )

    args = parser.parse_args()

    try:
        app = App(args.config, args.log_level)
        app.init()
        status = asyncio.run(app.run(args.duration if args.auto else None))
    except KeyboardInterrupt:
        print("\nGoodbye!")
        sys.exit(130)
    except Exception as e:
        print(f"Error: {e}")
        logging.error(f"Application error: {e}", exc_info=True)
        sys.exit(1)

    sys.exit(0 if status is SessionStatus.STOPPED else 1)


if __name__ == "__main__":
    main()
