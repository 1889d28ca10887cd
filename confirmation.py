"""Accept / edit / cancel state machine for a filename proposal.

``step`` is a pure transition function over ``ConfirmationState`` values;
``confirm_proposal`` drives it with terminal prompts, one decision per step.

    PROPOSED --accept--> ACCEPTED
    PROPOSED --cancel--> CANCELLED
    PROPOSED --edit----> EDITING
    EDITING  --edit(valid name)---> PROPOSED   (new proposal, asked again)
    EDITING  --edit(invalid name)-> EDITING    (error set, asked again)
    EDITING  --cancel--> CANCELLED
"""

from __future__ import annotations

import logging
from dataclasses import replace

import terminal
from filename_formatter import matches_naming_grammar
from models import (
    ConfirmationStage,
    ConfirmationState,
    DecisionKind,
    FilenameProposal,
    RenameDecision,
)

LOGGER = logging.getLogger(__name__)

GRAMMAR_HINT = (
    "Filename must look like author-yyyy-title-words.pdf "
    "(lowercase letters, digits and single dashes only)"
)


def start(proposal: FilenameProposal) -> ConfirmationState:
    return ConfirmationState(stage=ConfirmationStage.PROPOSED, proposal=proposal)


def step(state: ConfirmationState, decision: RenameDecision) -> ConfirmationState:
    """Return the state reached by applying one user decision."""
    if state.is_terminal:
        raise ValueError(f"No transitions out of terminal state {state.stage.value}")

    if decision.kind is DecisionKind.CANCEL:
        return ConfirmationState(stage=ConfirmationStage.CANCELLED, proposal=state.proposal)

    if state.stage is ConfirmationStage.PROPOSED:
        if decision.kind is DecisionKind.ACCEPT:
            return ConfirmationState(stage=ConfirmationStage.ACCEPTED, proposal=state.proposal)
        editing = ConfirmationState(stage=ConfirmationStage.EDITING, proposal=state.proposal)
        if decision.text is None:
            return editing
        return _apply_edit(editing, decision.text)

    if decision.kind is DecisionKind.ACCEPT:
        raise ValueError("Cannot accept while editing; submit a filename or cancel")
    if decision.text is None:
        return replace(state, error=None)
    return _apply_edit(state, decision.text)


def _apply_edit(state: ConfirmationState, text: str) -> ConfirmationState:
    candidate = text.strip()
    if not matches_naming_grammar(candidate):
        LOGGER.info("Rejected edited filename %r", candidate)
        return replace(state, error=f"{GRAMMAR_HINT}: {candidate!r}")
    return ConfirmationState(
        stage=ConfirmationStage.PROPOSED,
        proposal=replace(state.proposal, formatted=candidate),
    )


def confirm_proposal(proposal: FilenameProposal) -> ConfirmationState:
    """Prompt until the user accepts or cancels; return the terminal state."""
    state = start(proposal)
    while not state.is_terminal:
        if state.stage is ConfirmationStage.PROPOSED:
            decision = terminal.ask_decision(state.proposal)
        else:
            decision = terminal.ask_filename(state.proposal.formatted, state.error)
        state = step(state, decision)
        LOGGER.info("Confirmation moved to %s", state.stage.value)
    return state
