from unittest.mock import patch

import pytest

from errors import BackendUnreachable, NoModelAvailable
from model_selector import choose_model, select_model
from models import ModelChoice, ModelOrigin


def test_requested_model_wins_regardless_of_backend_state() -> None:
    choice = choose_model("mistral:7b", running=["llama3.2:latest"], installed=["qwen2.5:7b"])
    assert choice == ModelChoice(name="mistral:7b", origin=ModelOrigin.REQUESTED)


def test_requested_model_used_even_when_nothing_installed() -> None:
    assert choose_model("mistral:7b").origin is ModelOrigin.REQUESTED


def test_single_running_model_is_chosen() -> None:
    choice = choose_model(None, running=["llama3.2:latest"], installed=["mistral:7b", "llama3.2:latest"])
    assert choice == ModelChoice(name="llama3.2:latest", origin=ModelOrigin.RUNNING)


def test_first_running_model_is_lexicographic() -> None:
    choice = choose_model(None, running=["qwen2.5:7b", "gemma2:2b", "llama3.2:latest"])
    assert choice.name == "gemma2:2b"


def test_installed_model_used_when_none_running() -> None:
    choice = choose_model(None, running=[], installed=["mistral:7b", "llama3.2:latest"])
    assert choice == ModelChoice(name="llama3.2:latest", origin=ModelOrigin.INSTALLED)


def test_blank_request_falls_through_to_policy() -> None:
    choice = choose_model("   ", running=["llama3.2:latest"])
    assert choice.origin is ModelOrigin.RUNNING


def test_no_models_anywhere_raises_with_install_hint() -> None:
    with pytest.raises(NoModelAvailable, match="ollama pull"):
        choose_model(None, running=[], installed=[])


def test_select_model_with_request_does_not_query_backend() -> None:
    with patch("model_selector.ollama_client.list_running_models") as mock_running, \
         patch("model_selector.ollama_client.list_installed_models") as mock_installed:
        choice = select_model("mistral:7b")

    assert choice.origin is ModelOrigin.REQUESTED
    mock_running.assert_not_called()
    mock_installed.assert_not_called()


def test_select_model_skips_installed_listing_when_a_model_runs() -> None:
    with patch("model_selector.ollama_client.list_running_models", return_value=["llama3.2:latest"]), \
         patch("model_selector.ollama_client.list_installed_models") as mock_installed:
        choice = select_model()

    assert choice == ModelChoice(name="llama3.2:latest", origin=ModelOrigin.RUNNING)
    mock_installed.assert_not_called()


def test_select_model_falls_back_to_installed() -> None:
    with patch("model_selector.ollama_client.list_running_models", return_value=[]), \
         patch("model_selector.ollama_client.list_installed_models", return_value=["mistral:7b"]):
        choice = select_model()

    assert choice == ModelChoice(name="mistral:7b", origin=ModelOrigin.INSTALLED)


def test_select_model_without_models_raises() -> None:
    with patch("model_selector.ollama_client.list_running_models", return_value=[]), \
         patch("model_selector.ollama_client.list_installed_models", return_value=[]):
        with pytest.raises(NoModelAvailable):
            select_model()


def test_select_model_propagates_unreachable_backend() -> None:
    with patch("model_selector.ollama_client.list_running_models",
               side_effect=BackendUnreachable("Cannot connect to Ollama")):
        with pytest.raises(BackendUnreachable):
            select_model()
