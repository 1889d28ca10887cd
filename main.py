"""CLI entrypoint: rename an academic-paper PDF from LLM-extracted metadata."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

import terminal
from confirmation import confirm_proposal
from errors import EXIT_INTERRUPTED, EXIT_OK, InvalidInput, PaperRenamerError
from extraction import extract_proposal
from model_selector import select_model
from models import ConfirmationStage
from renamer import display_name, rename_file


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line flags."""
    parser = argparse.ArgumentParser(
        prog="paper-renamer",
        description="Rename an academic paper PDF to <author>-<year>-<title>.pdf "
        "using metadata extracted by a local Ollama model.",
        epilog="Exit codes: 0 renamed or cancelled, 1 invalid input, 3 extraction failed, "
        "4 no model available, 5 Ollama unreachable, 6 rename failed, 130 interrupted.",
    )
    parser.add_argument("pdf_path", metavar="FILE", help="Path to the PDF file to rename")
    parser.add_argument(
        "-m",
        "--model",
        default=None,
        help="Ollama model to use (default: first running model, else first installed model)",
    )
    parser.add_argument(
        "--backup",
        action="store_true",
        help="Keep a copy of the original file as <name>.bak before renaming",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress details")
    return parser.parse_args(argv)


def _check_input(pdf_path: str) -> Path:
    path = Path(pdf_path)
    if path.suffix.lower() != ".pdf":
        raise InvalidInput(f"File must be a PDF (*.pdf): {pdf_path}")
    if not path.is_file():
        raise InvalidInput(f"File not found: {pdf_path}")
    return path


def run(pdf_path: str, model: str | None = None, backup: bool = False) -> int:
    """Run one extract -> confirm -> rename cycle and return the exit code."""
    source = _check_input(pdf_path)

    print("Analyzing PDF...")
    choice = select_model(model)
    print(f"Extracting metadata using LLM (model: {choice.name})...")
    proposal = extract_proposal(source, choice)
    terminal.display_metadata(proposal.raw)

    state = confirm_proposal(proposal)
    if state.stage is ConfirmationStage.CANCELLED:
        logging.info("User cancelled rename of %s", source)
        terminal.display_cancelled()
        return EXIT_OK

    new_path = rename_file(source, state.proposal.formatted, backup=backup)
    terminal.display_success(display_name(source), display_name(new_path))
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    """Initialize config and execute one rename."""
    load_dotenv()
    args = parse_args(argv)
    level = os.getenv("LOG_LEVEL") or ("INFO" if args.verbose else "WARNING")
    logging.basicConfig(level=level.upper(), format="%(asctime)s %(levelname)s %(message)s")

    try:
        return run(args.pdf_path, model=args.model, backup=args.backup)
    except PaperRenamerError as exc:
        logging.info("Invocation failed with %s", type(exc).__name__)
        terminal.display_error(str(exc))
        return exc.exit_code
    except KeyboardInterrupt:
        terminal.display_cancelled()
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    sys.exit(main())
