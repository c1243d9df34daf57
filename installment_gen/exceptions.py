"""Custom exception hierarchy for installment-gen."""


class InstallmentGenError(Exception):
    """Base exception for all installment-gen errors."""


class EntityNotFoundError(InstallmentGenError):
    """Raised when a referenced entity does not exist."""


class ReferentialIntegrityError(EntityNotFoundError):
    """Raised when a foreign key reference is violated."""


class InvalidEntityStateError(InstallmentGenError):
    """Raised when an entity is in an invalid state for the operation."""


class DuplicateInvoiceNumberError(InvalidEntityStateError):
    """Raised when an invoice number is already present in the ledger."""


class ConfigurationError(InstallmentGenError):
    """Raised when configuration is invalid or missing."""


class ConfigurationMissingError(ConfigurationError):
    """Raised when numbering or installment plan configuration is absent."""


class StaleNumberingStateError(InstallmentGenError):
    """Raised when a numbering write-back was computed from an outdated version."""


class InvoiceGenerationError(InstallmentGenError):
    """Raised when invoice generation fails on malformed input."""


class SinkError(InstallmentGenError):
    """Raised when a sink operation fails."""
