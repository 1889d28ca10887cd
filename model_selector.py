"""Choose which local model extracts the metadata."""

from __future__ import annotations

import logging
from collections.abc import Iterable

import ollama_client
from errors import NoModelAvailable
from models import ModelChoice, ModelOrigin

LOGGER = logging.getLogger(__name__)

INSTALL_HINT = (
    "No Ollama models are installed. Please install a model first, for example:\n"
    "  - ollama pull llama3.2\n"
    "  - ollama pull mistral\n"
    "Visit https://ollama.com/library for more models."
)


def choose_model(
    requested: str | None,
    running: Iterable[str] = (),
    installed: Iterable[str] = (),
) -> ModelChoice:
    """Apply the selection policy to already-fetched model names.

    Order: explicit request, then running models, then installed models. Within
    a set the lexicographically first name wins so the choice is reproducible.
    """
    if requested and requested.strip():
        return ModelChoice(name=requested.strip(), origin=ModelOrigin.REQUESTED)

    running_names = sorted(name for name in running if name)
    if running_names:
        return ModelChoice(name=running_names[0], origin=ModelOrigin.RUNNING)

    installed_names = sorted(name for name in installed if name)
    if installed_names:
        return ModelChoice(name=installed_names[0], origin=ModelOrigin.INSTALLED)

    raise NoModelAvailable(INSTALL_HINT)


def select_model(requested: str | None = None) -> ModelChoice:
    """Resolve a model, querying the backend only as far as the policy needs."""
    if requested and requested.strip():
        choice = choose_model(requested)
    else:
        running = ollama_client.list_running_models()
        installed = [] if running else ollama_client.list_installed_models()
        choice = choose_model(None, running=running, installed=installed)

    LOGGER.info("Selected model=%s origin=%s", choice.name, choice.origin.value)
    return choice
