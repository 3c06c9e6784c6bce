"""Main application entry point for scribeproxy."""

import sys
import asyncio
import signal
import argparse
import logging
from pathlib import Path
from typing import Optional

from scribeproxy.services.proxy_service import TranscriptionProxyService
from scribeproxy.transcription.openai_backend import DEFAULT_API_URL, OpenAITranscriptionBackend
from scribeproxy.transcription.publisher import EventPublisher
from scribeproxy.ui.transcript_console import TranscriptConsole

from . import __version__
from .config import ScribeProxyConfig

logger = logging.getLogger(__name__)


class Server:

    def __init__(self, config_path: Optional[str], log_level: Optional[str] = None):
        # Load configuration
        self.config = ScribeProxyConfig(config_path)
        # Set up logging (command line overrides config)
        level = log_level or self.config.get('logging.level', 'INFO')
        setup_logging(self.config, level)
        self.proxy_service: Optional[TranscriptionProxyService] = None
        self.console: Optional[TranscriptConsole] = None
        self.stop_event: Optional[asyncio.Event] = None

    def init(self, show_console: bool = False):
        # Validate everything the proxy needs before binding the listener
        logger.info("Initializing services...")

        audio_format = self.config.get_audio_format()
        chunk_duration = self.config.get_chunk_duration_seconds()
        logger.info(f"Audio settings: {audio_format.sample_rate}Hz, {audio_format.channels} channels, "
                    f"{audio_format.bit_depth}-bit ({audio_format.bytes_per_second} bytes/s)")
        logger.info(f"Transcription window: {chunk_duration}s")

        backend = OpenAITranscriptionBackend(
            api_key=self.config.get_openai_api_key(),
            model=self.config.get('transcription.model', 'whisper-1'),
            api_url=self.config.get('transcription.api_url', DEFAULT_API_URL),
            timeout_seconds=float(self.config.get('transcription.timeout_seconds', 30.0)),
        )
        if not backend.initialize():
            raise RuntimeError("Transcription backend failed to initialize")

        self.proxy_service = TranscriptionProxyService(
            backend=backend,
            audio_format=audio_format,
            host=self.config.get('server.host', 'localhost'),
            port=int(self.config.get('server.port', 8765)),
            chunk_duration_seconds=chunk_duration,
            publisher=EventPublisher(),
            shutdown_timeout=float(self.config.get('server.shutdown_timeout_seconds', 30.0)),
        )

        if show_console or self.config.get('ui.console_transcripts', False):
            self.console = TranscriptConsole()

    async def run(self) -> None:
        """Serve until SIGINT/SIGTERM, then shut down gracefully."""
        self.stop_event = asyncio.Event()
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, self.request_stop)
            except NotImplementedError:
                # Windows event loops; KeyboardInterrupt still reaches main()
                pass

        await self.proxy_service.start()
        try:
            await self.stop_event.wait()
            logger.info("Shutting down gracefully...")
        finally:
            await self.cleanup()

    def request_stop(self) -> None:
        if self.stop_event is not None:
            self.stop_event.set()

    async def cleanup(self) -> None:
        if self.proxy_service is not None:
            await self.proxy_service.shutdown()
        if self.console is not None:
            self.console.shutdown()
        logger.info("Cleanup complete, exiting...")


def setup_logging(config, level: str = "INFO") -> None:

    """Set up logging configuration from YAML config."""
    log_file_path = config.get('logging.file_path')
    console_output = config.get('logging.console_output', True)
    console_level = config.get('logging.console_level', 'INFO')

    # Set up handlers
    handlers = []

    # File handler - only if a path is configured
    if log_file_path:
        log_dir = Path(log_file_path).parent
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file_path)
        file_handler.setLevel(logging.DEBUG)
        file_formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
        )
        file_handler.setFormatter(file_formatter)
        handlers.append(file_handler)

    # Console handler - only if enabled in config
    if console_output:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(getattr(logging, str(console_level).upper()))
        console_formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        console_handler.setFormatter(console_formatter)
        handlers.append(console_handler)

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(getattr(logging, level.upper()))
    for handler in handlers:
        root_logger.addHandler(handler)

    # aiohttp logs every request at INFO
    logging.getLogger("aiohttp.access").setLevel(logging.WARNING)

    # Log startup
    logger = logging.getLogger(__name__)
    logger.info("="*50)
    logger.info("scribeproxy starting up")
    logger.info(f"Log file: {log_file_path or '(none)'}")
    logger.info(f"Log level set to: {level}")
    logger.info("="*50)


def main() -> None:
    """Main entry point for scribeproxy."""
    parser = argparse.ArgumentParser(
        description="scribeproxy - windowed speech-to-text for live websocket audio streams"
    )

    parser.add_argument(
        "--config",
        type=str,
        help="Path to configuration YAML file (default: looks for scribeproxy.yaml)"
    )

    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Set logging level (overrides config)"
    )

    parser.add_argument(
        "--host",
        type=str,
        help="Listener host (overrides config)"
    )

    parser.add_argument(
        "--port",
        type=int,
        help="Listener port (overrides config)"
    )

    parser.add_argument(
        "--console",
        action="store_true",
        help="Print transcripts and speaker changes to the terminal as they arrive"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"scribeproxy v{__version__}"
    )

    args = parser.parse_args()

    try:
        server = Server(args.config, args.log_level)
        if args.host:
            server.config.set('server.host', args.host)
        if args.port is not None:
            server.config.set('server.port', args.port)
        server.init(show_console=args.console)
        asyncio.run(server.run())
    except KeyboardInterrupt:
        print("\nGoodbye!")
    except (ValueError, FileNotFoundError, OSError, RuntimeError) as e:
        print(f"Error: {e}")
        logging.error(f"Application error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
