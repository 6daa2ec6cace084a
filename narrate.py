#!/usr/bin/env python3
"""
Inkshade Document Reader, CLI entry point.

Reads a PDF or DOCX document aloud through the platform speech engine
(via pyttsx3), showing word-by-word progress.

Usage::

    python narrate.py input.pdf
    python narrate.py report.docx --voice Zira
    python narrate.py input.pdf --languages en,de --preferred-engine Microsoft
    python narrate.py --list-voices
    python narrate.py paper.pdf --print-text

Verbosity levels::

    -v 0   Quiet: warnings and errors only.
    -v 1   Normal: load summary and progress bar (default).
    -v 2   Debug: every backend event and state transition.

Press Ctrl+C to stop narration.
"""

import argparse
import logging
import sys
import time
from pathlib import Path

from tqdm import tqdm
from tqdm.contrib.logging import logging_redirect_tqdm

from core.errors import BackendUnavailable, DocumentError
from narration.controller import PlayState
from narration.pipeline import NarrationConfig, NarrationPipeline

logger = logging.getLogger("narration")

# Mapping from --verbose integer to logging level
_VERBOSITY_MAP = {
    0: logging.WARNING,
    1: logging.INFO,
    2: logging.DEBUG,
}

# Seconds between engine loop iterations
_PUMP_INTERVAL = 0.02


# ------------------------------------------------------------------
# Argument parsing
# ------------------------------------------------------------------


def _parse_languages(value: str):
    """
    Parse a comma-separated list of language prefixes (e.g. ``"en,es"``).

    Raises:
        argparse.ArgumentTypeError: On an empty list.
    """
    prefixes = tuple(p.strip() for p in value.split(",") if p.strip())
    if not prefixes:
        raise argparse.ArgumentTypeError(
            f"Invalid language list '{value}'. Use e.g. en,es,pt."
        )
    return prefixes


def _build_parser() -> argparse.ArgumentParser:
    """Construct the argument parser."""
    defaults = NarrationConfig()
    p = argparse.ArgumentParser(
        description="Read a PDF or DOCX document aloud.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "examples:\n"
            "  python narrate.py paper.pdf\n"
            "  python narrate.py notes.docx --voice Zira\n"
            "  python narrate.py --list-voices\n"
        ),
    )

    p.add_argument(
        "input",
        nargs="?",
        default=None,
        help="Path to a .pdf or .docx file (optional with --list-voices)",
    )

    # -- Voice -------------------------------------------------------------
    voice = p.add_argument_group("voice")
    voice.add_argument(
        "--voice",
        default=None,
        metavar="NAME",
        help="Use the first voice whose name contains NAME",
    )
    voice.add_argument(
        "--languages",
        type=_parse_languages,
        default=defaults.language_prefixes,
        metavar="LIST",
        help="Comma-separated language prefixes to offer "
        f"(default: {','.join(defaults.language_prefixes)})",
    )
    voice.add_argument(
        "--preferred-engine",
        default=defaults.preferred_engine,
        metavar="MARKER",
        help="Default to a voice whose name contains MARKER "
        f"(default: {defaults.preferred_engine})",
    )
    voice.add_argument(
        "--driver",
        default=None,
        choices=["sapi5", "nsss", "espeak"],
        help="Force a pyttsx3 driver",
    )
    voice.add_argument(
        "--list-voices",
        action="store_true",
        help="List available voices, then exit",
    )

    # -- Output control ----------------------------------------------------
    out = p.add_argument_group("output")
    out.add_argument(
        "--print-text",
        action="store_true",
        help="Print the extracted text instead of reading it aloud",
    )
    out.add_argument(
        "-v",
        "--verbose",
        type=int,
        choices=[0, 1, 2],
        default=1,
        help="Verbosity: 0=quiet, 1=normal (default), 2=debug",
    )
    out.add_argument(
        "--no-progress",
        action="store_true",
        help="Disable the word progress bar",
    )

    return p


# ------------------------------------------------------------------
# Logging setup
# ------------------------------------------------------------------


def _configure_logging(verbosity: int) -> None:
    """
    Set up the ``narration`` and ``core`` loggers.

    At verbosity 0 (WARNING), uses a minimal format.  At DEBUG, includes
    timestamps and the module name for traceability.
    """
    level = _VERBOSITY_MAP.get(verbosity, logging.INFO)

    if level <= logging.DEBUG:
        fmt = "%(asctime)s %(name)s %(levelname)s: %(message)s"
        datefmt = "%H:%M:%S"
    elif level <= logging.INFO:
        fmt = "%(message)s"
        datefmt = None
    else:
        fmt = "%(levelname)s: %(message)s"
        datefmt = None

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    for name in ("narration", "core"):
        root = logging.getLogger(name)
        root.setLevel(level)
        root.handlers.clear()
        root.addHandler(handler)

    # Suppress noisy third-party loggers regardless of verbosity
    for name in ("comtypes", "pyttsx3"):
        logging.getLogger(name).setLevel(logging.WARNING)


# ------------------------------------------------------------------
# Sub-commands
# ------------------------------------------------------------------


def _cmd_list_voices(pipeline: NarrationPipeline) -> None:
    """Print the voices the catalog offers, then exit."""
    snapshot = pipeline.snapshot()
    if not snapshot.available_voices:
        logger.warning("The speech engine reported no usable voices")
        return

    logger.info("  %-3s %-40s %-8s %s", "", "NAME", "LANG", "ID")
    for voice in snapshot.available_voices:
        marker = "*" if voice == snapshot.selected_voice else ""
        logger.info(
            "  %-3s %-40s %-8s %s",
            marker,
            voice.name[:40],
            voice.language_tag,
            voice.backend_id,
        )
    logger.info("")
    logger.info("* = default.  Use --voice NAME to select.")


def _narrate(pipeline: NarrationPipeline, show_progress: bool) -> int:
    """Speak the loaded text until it ends or the user interrupts."""
    backend = pipeline.backend
    words = pipeline.snapshot().word_tokens

    if not pipeline.play():
        logger.warning("Nothing to read in this document")
        return 1

    with logging_redirect_tqdm(), tqdm(
        total=len(words),
        unit="word",
        disable=not show_progress,
    ) as bar:
        try:
            while pipeline.snapshot().play_state is not PlayState.IDLE:
                backend.pump()
                snapshot = pipeline.snapshot()
                spoken = snapshot.current_word_index + 1
                if spoken > bar.n:
                    bar.update(spoken - bar.n)
                    bar.set_postfix_str(snapshot.current_word or "")
                time.sleep(_PUMP_INTERVAL)
        except KeyboardInterrupt:
            logger.info("Stopped")
            pipeline.stop()
            return 130

    return 0


# ------------------------------------------------------------------
# Entry point
# ------------------------------------------------------------------


def main():
    """Parse arguments, configure logging, and read the document."""
    parser = _build_parser()
    args = parser.parse_args()

    _configure_logging(args.verbose)

    if args.input is None and not args.list_voices:
        parser.error("An input file is required unless using --list-voices.")

    config = NarrationConfig(
        language_prefixes=args.languages,
        preferred_engine=args.preferred_engine,
    )

    from narration.tts.pyttsx3_backend import Pyttsx3Backend

    try:
        backend = Pyttsx3Backend(driver_name=args.driver)
    except BackendUnavailable as e:
        logger.error("%s", e)
        sys.exit(1)

    try:
        code = _run(parser, args, backend, config)
    finally:
        backend.close()
    if code:
        sys.exit(code)


def _run(parser, args, backend, config) -> int:
    """Open the document and read it aloud; returns the exit code."""
    with NarrationPipeline(backend, config=config) as pipeline:
        if args.list_voices:
            _cmd_list_voices(pipeline)
            return 0

        input_path = Path(args.input)
        if not input_path.exists():
            parser.error(f"Input file not found: {input_path}")

        try:
            text = pipeline.open_file(input_path)
        except (DocumentError, BackendUnavailable) as e:
            logger.error("Error: %s", e)
            return 1

        if args.print_text:
            print(text)
            return 0

        if args.voice:
            voice = pipeline.catalog.find(args.voice)
            if voice is None:
                logger.warning("No voice matches '%s'; using the default", args.voice)
            else:
                pipeline.select(voice)

        selected = pipeline.snapshot().selected_voice
        logger.info("Inkshade Document Reader")
        logger.info("  Input:  %s", input_path)
        logger.info("  Words:  %d", len(pipeline.snapshot().word_tokens))
        logger.info("  Voice:  %s", selected.label if selected else "engine default")

        return _narrate(pipeline, show_progress=not args.no_progress and args.verbose > 0)


if __name__ == "__main__":
    main()
