"""Ledger exceptions."""

from installment_ledger.models.reports import ValidationResult


class LedgerError(Exception):
    """Base exception for the ledger engine."""
    pass


class OperationRejectedError(LedgerError):
    """
    A command failed validation and wrote nothing.

    The message is the human-readable reason; the full result (including
    any warnings) is kept on `.result`.
    """

    def __init__(self, result: ValidationResult):
        self.result = result
        super().__init__(result.reason or "Operation rejected")

    @property
    def reason(self) -> str:
        return str(self)


class PlanRejectedError(OperationRejectedError):
    """A new installment plan could not be created."""
    pass


class PaymentRejectedError(OperationRejectedError):
    """A payment could not be recorded against a plan."""
    pass


class TransactionRejectedError(OperationRejectedError):
    """A manual treasury entry could not be recorded."""
    pass
