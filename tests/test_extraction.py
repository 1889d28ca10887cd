import json
from pathlib import Path
from unittest.mock import patch

import pytest

from errors import BackendUnreachable, InvalidYear, MetadataExtractionFailed, NoExtractableText
from extraction import build_prompt, extract_proposal
from models import ModelChoice, ModelOrigin, PaperMetadata

_MODEL = ModelChoice(name="llama3.2:latest", origin=ModelOrigin.RUNNING)
_PAGE_TEXT = "Attention Is All You Need\nAshish Vaswani, Noam Shazeer\nGoogle Brain\n2017"
_GOOD = json.dumps({"first_author": "Vaswani", "year": "2017", "title": "Attention Is All You Need"})


def test_build_prompt_embeds_text_and_schema() -> None:
    prompt = build_prompt(_PAGE_TEXT)

    assert _PAGE_TEXT in prompt
    assert '"first_author"' in prompt
    assert '"year"' in prompt
    assert '"title"' in prompt
    assert build_prompt(_PAGE_TEXT) == prompt


def test_extract_proposal_returns_formatted_proposal() -> None:
    with patch("extraction.pdf_text.extract_leading_text", return_value=_PAGE_TEXT), \
         patch("extraction.ollama_client.generate", return_value=_GOOD) as mock_generate:
        proposal = extract_proposal("/papers/1706.03762.pdf", _MODEL)

    assert proposal.raw == PaperMetadata(author="Vaswani", year=2017, title="Attention Is All You Need")
    assert proposal.formatted == "vaswani-2017-attention-is-all-you-need.pdf"
    assert proposal.source_path == Path("/papers/1706.03762.pdf")
    mock_generate.assert_called_once_with("llama3.2:latest", build_prompt(_PAGE_TEXT))


def test_rejected_output_is_retried_with_same_prompt() -> None:
    with patch("extraction.pdf_text.extract_leading_text", return_value=_PAGE_TEXT), \
         patch("extraction.ollama_client.generate",
               side_effect=["not json", _GOOD]) as mock_generate:
        proposal = extract_proposal("paper.pdf", _MODEL, max_attempts=3)

    assert proposal.formatted == "vaswani-2017-attention-is-all-you-need.pdf"
    assert mock_generate.call_count == 2
    prompts = [call.args[1] for call in mock_generate.call_args_list]
    assert prompts[0] == prompts[1]


def test_retry_bound_raises_with_last_rejection() -> None:
    responses = [
        "not json",
        json.dumps({"first_author": "Vaswani", "year": "17", "title": "Attention"}),
    ]

    with patch("extraction.pdf_text.extract_leading_text", return_value=_PAGE_TEXT), \
         patch("extraction.ollama_client.generate", side_effect=responses) as mock_generate:
        with pytest.raises(MetadataExtractionFailed) as excinfo:
            extract_proposal("paper.pdf", _MODEL, max_attempts=2)

    assert mock_generate.call_count == 2
    assert excinfo.value.attempts == 2
    assert isinstance(excinfo.value.last_error, InvalidYear)


def test_zero_attempts_still_calls_model_once() -> None:
    with patch("extraction.pdf_text.extract_leading_text", return_value=_PAGE_TEXT), \
         patch("extraction.ollama_client.generate", return_value="{}") as mock_generate:
        with pytest.raises(MetadataExtractionFailed):
            extract_proposal("paper.pdf", _MODEL, max_attempts=0)

    assert mock_generate.call_count == 1


def test_no_extractable_text_skips_model() -> None:
    with patch("extraction.pdf_text.extract_leading_text",
               side_effect=NoExtractableText("The file may be a scanned image.")), \
         patch("extraction.ollama_client.generate") as mock_generate:
        with pytest.raises(NoExtractableText):
            extract_proposal("scan.pdf", _MODEL)

    mock_generate.assert_not_called()


def test_unreachable_backend_is_not_retried() -> None:
    with patch("extraction.pdf_text.extract_leading_text", return_value=_PAGE_TEXT), \
         patch("extraction.ollama_client.generate",
               side_effect=BackendUnreachable("Cannot connect to Ollama")) as mock_generate:
        with pytest.raises(BackendUnreachable):
            extract_proposal("paper.pdf", _MODEL, max_attempts=3)

    assert mock_generate.call_count == 1
