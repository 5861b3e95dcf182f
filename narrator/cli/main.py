"""CLI entry point for the narrator."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from narrator import __version__
from narrator.lib.config import get_narrator_config
from narrator.lib.error_catalog import get_error_for_exception
from narrator.lib.exceptions import (
    ConfigError,
    CredentialError,
    NarratorError,
)
from narrator.services.tts import NarratorSession

logger = logging.getLogger(__name__)


# Exit codes per CLI contract
EXIT_SUCCESS = 0
EXIT_USAGE_ERROR = 1
EXIT_CONFIG_ERROR = 2
EXIT_CREDENTIAL_ERROR = 3
EXIT_PROVIDER_ERROR = 4
EXIT_INTERNAL_ERROR = 5


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="narrator",
        description="Narrate text with the Camb.ai text-to-speech API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  narrator voices
  narrator say "Soft cotton tee. This product costs $20." -o tee.wav
  narrator say "Hello" --voice-id 20303 --language 1 --gender 2
        """,
    )

    parser.add_argument(
        "--api-key",
        type=str,
        default=None,
        help="Camb.ai API key (default: CAMB_API_KEY)",
    )

    parser.add_argument(
        "--base-url",
        type=str,
        default=None,
        help="Camb.ai API base URL (default: CAMB_BASE_URL or the public API)",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show detailed progress during execution",
    )

    parser.add_argument(
        "-V", "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("voices", help="List available voices")

    say = subparsers.add_parser("say", help="Synthesize text to audio")
    say.add_argument("text", type=str, help="Text to narrate")
    say.add_argument(
        "--voice-id",
        type=int,
        default=None,
        help="Voice to narrate with (a rejected voice is replaced by a catalog voice)",
    )
    say.add_argument("--language", type=int, default=None, help="Provider language code")
    say.add_argument("--gender", type=int, default=None, help="Provider gender code")
    say.add_argument(
        "-o", "--output",
        type=str,
        default=None,
        help="Where to write inline audio (default: narration.<ext>)",
    )

    return parser


def configure_logging(verbose: bool) -> None:
    """Configure root logging for CLI use."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


async def run(args: argparse.Namespace) -> int:
    """
    Run the requested narrator command.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code
    """
    logger.debug(f"Running narrator command: {args.command}")
    config = get_narrator_config()
    if args.api_key:
        config.api_key = args.api_key
    if args.base_url:
        config.base_url = args.base_url

    try:
        config.validate_credentials()
    except ConfigError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    async with NarratorSession(config) as session:
        voice_id = getattr(args, "voice_id", None)
        if not await session.initialize(config.api_key, voice_id):
            error = session.last_error or CredentialError("Initialization failed")
            print(f"Error: {get_error_for_exception(error).message}", file=sys.stderr)
            if isinstance(error, CredentialError):
                return EXIT_CREDENTIAL_ERROR
            return EXIT_PROVIDER_ERROR

        if args.command == "voices":
            return await _list_voices(session)
        return await _say(session, args)


async def _list_voices(session: NarratorSession) -> int:
    voices = await session.list_voices()
    for voice in voices:
        marker = "*" if voice.id == session.selected_voice_id else " "
        print(f"{marker} {voice.id}\t{voice.display_name}")
    return EXIT_SUCCESS


async def _say(session: NarratorSession, args: argparse.Namespace) -> int:
    try:
        audio = await session.synthesize(
            args.text,
            language=args.language,
            gender=args.gender,
            voice_id=args.voice_id,
        )
    except NarratorError as e:
        user_error = get_error_for_exception(e)
        print(f"Error: {user_error.message} ({e.message})", file=sys.stderr)
        return EXIT_PROVIDER_ERROR

    try:
        if not audio.is_inline:
            print(audio.url)
            return EXIT_SUCCESS

        output = Path(args.output or f"narration.{audio.extension}")
        output.write_bytes(audio.content)
        print(f"Saved {audio.size_bytes} bytes of {audio.media_type} to {output}")
        return EXIT_SUCCESS
    except OSError as e:
        print(f"Error: Could not write audio: {e}", file=sys.stderr)
        return EXIT_INTERNAL_ERROR
    finally:
        session.release_result(audio)


def main() -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help(sys.stderr)
        return EXIT_USAGE_ERROR

    configure_logging(args.verbose)

    try:
        return asyncio.run(run(args))
    except KeyboardInterrupt:
        return EXIT_INTERNAL_ERROR


if __name__ == "__main__":
    sys.exit(main())
