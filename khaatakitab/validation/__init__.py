"""Transaction form validation."""

from khaatakitab.validation.validator import (
    TransactionRejectedError,
    TransactionValidator,
)

__all__ = ["TransactionRejectedError", "TransactionValidator"]
