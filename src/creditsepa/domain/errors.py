"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested file or record does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class UpstreamError(DomainError):
    """The accounting API could not be reached or returned an unusable answer."""


def no_candidates() -> str:
    """Return message for an empty payment batch."""
    return "No resolved credit notes with an IBAN; nothing to put in a SEPA file"


def mapping_file_not_found(path: str) -> str:
    """Return message for a missing mapping upload."""
    return f"Mapping file not found: {path}"


def duplicate_message_id(message_id: str) -> str:
    """Return message when a payment file id was already issued."""
    return (
        f"A payment file with message id '{message_id}' already exists. "
        "Identifiers have one-second resolution; wait a moment and try again."
    )


def upstream_status(status_code: int, url: str) -> str:
    """Return message for a non-success response from the accounting API."""
    return f"Accounting API returned status {status_code} for {url}"
