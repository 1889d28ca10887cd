"""PDF text -> model prompt -> validated metadata -> filename proposal."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import ollama_client
import pdf_text
from errors import MetadataExtractionFailed, MetadataRejection
from filename_formatter import format_filename
from metadata_validator import validate_metadata
from models import FilenameProposal, ModelChoice

METADATA_MAX_RETRIES = int(os.getenv("METADATA_MAX_RETRIES", "2"))
MAX_ATTEMPTS = 1 + max(METADATA_MAX_RETRIES, 0)

LOGGER = logging.getLogger(__name__)

PROMPT_TEMPLATE = """You are analyzing the first page of an academic paper. Extract the following information and respond ONLY with valid JSON in this exact format:
{{
  "first_author": "LastName",
  "year": "YYYY",
  "title": "Full Paper Title"
}}

Rules:
- For first_author: extract ONLY the last name of the first author
- For year: extract the publication year as a 4-digit number
- For title: extract the complete paper title
- Respond with ONLY the JSON, no other text

Paper text:
{text}

JSON response:"""


def build_prompt(text: str) -> str:
    return PROMPT_TEMPLATE.format(text=text)


def extract_proposal(
    pdf_path: str | Path,
    model_choice: ModelChoice,
    max_attempts: int = MAX_ATTEMPTS,
) -> FilenameProposal:
    """Infer metadata for one PDF and turn it into a filename proposal.

    NoExtractableText and BackendUnreachable propagate on first occurrence.
    Rejected model output is retried with the same prompt; once every attempt
    is rejected, MetadataExtractionFailed carries the last rejection.
    """
    source_path = Path(pdf_path)
    max_attempts = max(max_attempts, 1)
    prompt = build_prompt(pdf_text.extract_leading_text(source_path))

    last_error: MetadataRejection | None = None
    for attempt in range(1, max_attempts + 1):
        response = ollama_client.generate(model_choice.name, prompt)
        try:
            metadata = validate_metadata(response)
        except MetadataRejection as exc:
            last_error = exc
            LOGGER.warning(
                "Model output rejected for %s on attempt %s/%s: %s",
                source_path.name,
                attempt,
                max_attempts,
                exc,
            )
            continue

        LOGGER.info(
            "Metadata extracted for %s on attempt %s: author=%s year=%s",
            source_path.name,
            attempt,
            metadata.author,
            metadata.year,
        )
        return FilenameProposal(
            raw=metadata,
            formatted=format_filename(metadata),
            source_path=source_path,
        )

    raise MetadataExtractionFailed(max_attempts, last_error) from last_error
