"""Shared typed models for the rename pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


@dataclass(frozen=True, slots=True)
class PaperMetadata:
    """Validated first-author / year / title record for one paper."""

    author: str
    year: int
    title: str


@dataclass(frozen=True, slots=True)
class FilenameProposal:
    """Candidate filename awaiting the user's decision."""

    raw: PaperMetadata
    formatted: str
    source_path: Path


class ModelOrigin(Enum):
    REQUESTED = "requested"
    RUNNING = "running"
    INSTALLED = "installed"


@dataclass(frozen=True, slots=True)
class ModelChoice:
    name: str
    origin: ModelOrigin


class DecisionKind(Enum):
    ACCEPT = "accept"
    CANCEL = "cancel"
    EDIT = "edit"


@dataclass(frozen=True, slots=True)
class RenameDecision:
    """One user decision fed into the confirmation state machine.

    ``text`` is only meaningful for EDIT; an EDIT without text asks for the
    replacement filename to be solicited next.
    """

    kind: DecisionKind
    text: str | None = None

    @classmethod
    def accept(cls) -> RenameDecision:
        return cls(DecisionKind.ACCEPT)

    @classmethod
    def cancel(cls) -> RenameDecision:
        return cls(DecisionKind.CANCEL)

    @classmethod
    def edit(cls, text: str | None = None) -> RenameDecision:
        return cls(DecisionKind.EDIT, text)


class ConfirmationStage(Enum):
    PROPOSED = "proposed"
    EDITING = "editing"
    ACCEPTED = "accepted"
    CANCELLED = "cancelled"


@dataclass(frozen=True, slots=True)
class ConfirmationState:
    stage: ConfirmationStage
    proposal: FilenameProposal
    error: str | None = None

    @property
    def is_terminal(self) -> bool:
        return self.stage in (ConfirmationStage.ACCEPTED, ConfirmationStage.CANCELLED)
