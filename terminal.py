"""Plain-text prompts and messages for the interactive rename."""

from __future__ import annotations

import sys

from models import FilenameProposal, PaperMetadata, RenameDecision

_DECISION_KEYS = {
    "y": RenameDecision.accept,
    "yes": RenameDecision.accept,
    "n": RenameDecision.cancel,
    "no": RenameDecision.cancel,
    "e": RenameDecision.edit,
    "edit": RenameDecision.edit,
}


def display_metadata(metadata: PaperMetadata) -> None:
    print("\nExtracted metadata:")
    print(f"  - First Author: {metadata.author}")
    print(f"  - Year: {metadata.year}")
    print(f"  - Title: {metadata.title}")


def ask_decision(proposal: FilenameProposal) -> RenameDecision:
    """Ask yes/no/edit until one of them is entered. EOF counts as no."""
    print(f"\nProposed filename: {proposal.formatted}")
    question = (
        f"Rename '{proposal.source_path.name}' to '{proposal.formatted}'? "
        "[Y]es / [n]o / [e]dit: "
    )
    while True:
        try:
            answer = input(question).strip().lower()
        except EOFError:
            return RenameDecision.cancel()
        if not answer:
            return RenameDecision.accept()
        factory = _DECISION_KEYS.get(answer)
        if factory is not None:
            return factory()
        print("Please answer y, n or e.")


def ask_filename(current: str, error: str | None = None) -> RenameDecision:
    """Ask for a replacement filename; an empty answer keeps ``current``. EOF cancels."""
    if error:
        display_error(error)
    print("\nEdit the filename (leave empty to keep the current one):")
    try:
        answer = input(f"Filename [{current}]: ")
    except EOFError:
        return RenameDecision.cancel()
    return RenameDecision.edit(answer.strip() or current)


def display_success(old_name: str, new_name: str) -> None:
    print("\n✓ File renamed successfully!")
    print(f"  {old_name} -> {new_name}")


def display_cancelled() -> None:
    print("\nOperation cancelled.")


def display_error(message: str) -> None:
    print(f"\n⚠ Error: {message}", file=sys.stderr)
