"""
Ledger Error Module

Error kinds for recoverable ledger failures, the exceptions that carry them,
and the Result value returned by Ledger Controller operations.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class AccountError(Enum):
    """Recoverable failure kinds reported by the ledger"""
    DUPLICATE_USERNAME = "duplicate_username"
    UNKNOWN_USERNAME = "unknown_username"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    INVALID_AMOUNT = "invalid_amount"
    MALFORMED_CREDENTIAL_RECORD = "malformed_credential_record"


DEFAULT_MESSAGES = {
    AccountError.DUPLICATE_USERNAME: "An account with that username already exists.",
    AccountError.UNKNOWN_USERNAME: "No account with that username exists.",
    AccountError.INSUFFICIENT_FUNDS: "There are not enough funds to withdraw that amount.",
    AccountError.INVALID_AMOUNT: "Amount must be greater than zero.",
    AccountError.MALFORMED_CREDENTIAL_RECORD: "The stored credential record is malformed.",
}


class LedgerError(Exception):
    """Exception carrying an AccountError kind"""
    
    def __init__(self, error: AccountError, message: Optional[str] = None):
        self.error = error
        self.message = message or DEFAULT_MESSAGES[error]
        super().__init__(self.message)


class MalformedCredentialRecord(LedgerError):
    """Raised when a stored credential hash cannot be decoded"""
    
    def __init__(self, message: Optional[str] = None):
        super().__init__(AccountError.MALFORMED_CREDENTIAL_RECORD, message)


@dataclass(frozen=True)
class Result:
    """
    Outcome of a ledger operation.
    
    Exactly one of `value` (on success) or `error` (on failure) is meaningful.
    A success may legitimately carry a falsy value, e.g. login returning False
    for a password that did not match.
    """
    value: Any = None
    error: Optional[AccountError] = None
    message: Optional[str] = None
    
    @property
    def ok(self) -> bool:
        return self.error is None
    
    @classmethod
    def success(cls, value: Any = None) -> 'Result':
        return cls(value=value)
    
    @classmethod
    def failure(cls, error: AccountError, message: Optional[str] = None) -> 'Result':
        return cls(error=error, message=message or DEFAULT_MESSAGES[error])
    
    def unwrap(self) -> Any:
        """Return the value, raising LedgerError if the operation failed"""
        if self.error is not None:
            raise LedgerError(self.error, self.message)
        return self.value
