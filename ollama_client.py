"""Thin wrapper around a local Ollama server's HTTP API."""

from __future__ import annotations

import logging
import os
from typing import Any

import requests

from errors import BackendUnreachable

OLLAMA_HOST = os.getenv("OLLAMA_HOST", "http://localhost:11434").rstrip("/")
OLLAMA_TEMPERATURE = float(os.getenv("OLLAMA_TEMPERATURE", "0.1"))
REQUEST_TIMEOUT_SECONDS = float(os.getenv("OLLAMA_TIMEOUT_SECONDS", "60"))
LIST_TIMEOUT_SECONDS = float(os.getenv("OLLAMA_LIST_TIMEOUT_SECONDS", "5"))

START_SERVER_HINT = (
    "Please start Ollama first:\n"
    "  1. If Ollama is not installed, visit: https://ollama.com\n"
    "  2. If Ollama is installed, start it with: ollama serve\n"
    "  3. Then pull a model, for example: ollama pull llama3.2"
)

LOGGER = logging.getLogger(__name__)


def generate(model: str, prompt: str) -> str:
    """Run one non-streaming completion in JSON mode and return the text."""
    payload = {
        "model": model,
        "prompt": prompt,
        "stream": False,
        "format": "json",
        "options": {"temperature": OLLAMA_TEMPERATURE},
    }

    LOGGER.info("Calling Ollama model=%s timeout=%ss", model, REQUEST_TIMEOUT_SECONDS)
    response = _request("POST", "/api/generate", timeout=REQUEST_TIMEOUT_SECONDS, json=payload)
    if not response.ok:
        raise BackendUnreachable(
            f"Ollama returned HTTP {response.status_code} for model '{model}': {_error_detail(response)}"
        )

    body = _json_body(response)
    content = body.get("response") if isinstance(body, dict) else None
    return content if isinstance(content, str) else ""


def list_running_models() -> list[str]:
    """Names of models currently loaded in memory.

    Servers without /api/ps answer with an error status; that is reported as
    no running models so selection falls through to installed ones.
    """
    response = _request("GET", "/api/ps", timeout=LIST_TIMEOUT_SECONDS)
    if not response.ok:
        LOGGER.info("Ollama /api/ps returned HTTP %s, treating as no running models", response.status_code)
        return []
    return _model_names(_json_body(response))


def list_installed_models() -> list[str]:
    response = _request("GET", "/api/tags", timeout=LIST_TIMEOUT_SECONDS)
    if not response.ok:
        raise BackendUnreachable(
            f"Ollama returned HTTP {response.status_code} when listing models: {_error_detail(response)}"
        )
    return _model_names(_json_body(response))


def _request(method: str, path: str, timeout: float, **kwargs: Any) -> requests.Response:
    url = f"{OLLAMA_HOST}{path}"
    try:
        return requests.request(method, url, timeout=timeout, **kwargs)
    except requests.Timeout as exc:
        raise BackendUnreachable(f"Ollama at {OLLAMA_HOST} did not answer within {timeout:g}s") from exc
    except requests.RequestException as exc:
        raise BackendUnreachable(f"Cannot connect to Ollama at {OLLAMA_HOST}. {START_SERVER_HINT}") from exc


def _json_body(response: requests.Response) -> Any:
    try:
        return response.json()
    except ValueError as exc:
        raise BackendUnreachable(f"Ollama returned a non-JSON body from {response.url}") from exc


def _model_names(payload: Any) -> list[str]:
    models = payload.get("models") if isinstance(payload, dict) else None
    if not isinstance(models, list):
        return []
    names = []
    for item in models:
        if isinstance(item, dict) and isinstance(item.get("name"), str) and item["name"].strip():
            names.append(item["name"].strip())
    return names


def _error_detail(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text.strip() or response.reason or "no detail"
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return str(body)
