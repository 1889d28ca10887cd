"""Error taxonomy for the rename pipeline.

Each class carries the process exit code ``main`` uses when the error ends an
invocation, so scripting callers can branch on the failure kind.
"""

from __future__ import annotations

EXIT_OK = 0
EXIT_INVALID_INPUT = 1
EXIT_EXTRACTION_FAILED = 3
EXIT_NO_MODEL = 4
EXIT_BACKEND_UNREACHABLE = 5
EXIT_RENAME_FAILED = 6
EXIT_INTERRUPTED = 130


class PaperRenamerError(Exception):
    """Base class for failures that terminate an invocation."""

    exit_code = 1


class InvalidInput(PaperRenamerError):
    """The command-line input is not an existing PDF file."""

    exit_code = EXIT_INVALID_INPUT


class ExtractionError(PaperRenamerError):
    exit_code = EXIT_EXTRACTION_FAILED


class NoExtractableText(ExtractionError):
    """The PDF has no text layer in its leading pages (likely a scanned image)."""


class UnreadablePdf(ExtractionError):
    """The file could not be opened or parsed as a PDF."""


class MetadataRejection(ExtractionError):
    """Model output that failed validation. Recovered by the retry loop."""


class MalformedResponse(MetadataRejection):
    pass


class InvalidYear(MetadataRejection):
    pass


class EmptyField(MetadataRejection):
    pass


class MetadataExtractionFailed(ExtractionError):
    """Every attempt produced a rejected response."""

    def __init__(self, attempts: int, last_error: MetadataRejection) -> None:
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            f"Model output was rejected after {attempts} attempt(s): {last_error}"
        )


class NoModelAvailable(PaperRenamerError):
    exit_code = EXIT_NO_MODEL


class BackendUnreachable(PaperRenamerError):
    """The Ollama server could not be reached, timed out, or returned an error status."""

    exit_code = EXIT_BACKEND_UNREACHABLE


class RenameError(PaperRenamerError):
    exit_code = EXIT_RENAME_FAILED


class TargetExists(RenameError):
    pass


class SourceMissing(RenameError):
    pass


class RenameFailed(RenameError):
    pass
