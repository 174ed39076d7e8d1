"""Exception taxonomy for readmegen.

Only these errors are surfaced to the user. Failures of secondary
repository lookups (releases, contributors, branch protection, README,
manifest) are absorbed by the gateway and never raised.
"""


class ReadmeGenError(Exception):
    """Base class for all user-facing readmegen errors."""

    pass


class InvalidUrlError(ReadmeGenError, ValueError):
    """Raised when a repository URL is not shaped like host/owner/repo."""

    pass


class RepositoryLookupError(ReadmeGenError):
    """Raised when the mandatory repository identity lookup fails.

    Attributes:
        status_code: HTTP status returned by the provider, if any
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MissingCredentialError(ReadmeGenError):
    """Raised when generation is requested without a generation API key."""

    pass


class GenerationServiceError(ReadmeGenError):
    """Raised when the text-generation service fails or rejects a request.

    Attributes:
        partial_text: Text streamed before the failure (may be empty)
    """

    def __init__(self, message: str, partial_text: str = "") -> None:
        super().__init__(message)
        self.partial_text = partial_text


class NoRepositoryError(ReadmeGenError):
    """Raised when an instruction is requested before any analysis."""

    pass
