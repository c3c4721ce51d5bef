"""
Account Module

The Account entity owns its username, stored credential hash, balance and
append-only transaction history. Balance and history change together under
the account's own lock, and only through credit/debit.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import InvalidOperation
from enum import Enum
from typing import List, Optional, Tuple
import threading

from .currency import Money, Currency
from .errors import AccountError, LedgerError


DEFAULT_TIMESTAMP_FORMAT = "%A, %d %B %Y %H:%M:%S"


class TransactionKind(Enum):
    """Balance-changing operations recorded in account history"""
    DEPOSIT = "Deposit"
    WITHDRAWAL = "Withdrawal"


@dataclass(frozen=True)
class TransactionRecord:
    """One entry of an account's history"""
    timestamp: datetime
    kind: TransactionKind
    amount: Money
    balance: Money  # Balance after the transaction
    
    def render(self, timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT) -> str:
        """Human-readable history line"""
        return (
            f"{self.timestamp.strftime(timestamp_format)} - "
            f"{self.kind.value} of {self.amount.to_display()}; "
            f"New balance: {self.balance.to_display()}"
        )


class Account:
    """
    Ledger account for a single user.
    
    The plaintext password never reaches this class; only the encoded hash
    produced by the CredentialHasher is kept.
    """
    
    def __init__(self, username: str, password_hash: str,
                 currency: Currency = Currency.USD, created_at: Optional[datetime] = None):
        self._username = username
        self._password_hash = password_hash
        self._currency = currency
        self._created_at = created_at
        self._balance = Money.zero(currency)
        self._history: List[TransactionRecord] = []
        self._lock = threading.RLock()
    
    def __repr__(self) -> str:
        return f"Account(username={self._username!r}, balance={self._balance.to_string()!r})"
    
    @property
    def username(self) -> str:
        return self._username
    
    @property
    def password_hash(self) -> str:
        return self._password_hash
    
    @property
    def currency(self) -> Currency:
        return self._currency
    
    @property
    def created_at(self) -> Optional[datetime]:
        return self._created_at
    
    @property
    def balance(self) -> Money:
        with self._lock:
            return self._balance
    
    @property
    def history(self) -> Tuple[TransactionRecord, ...]:
        """Snapshot of the history, oldest first"""
        with self._lock:
            return tuple(self._history)
    
    def _check_amount(self, amount: Money) -> None:
        if amount.currency != self._currency:
            raise LedgerError(
                AccountError.INVALID_AMOUNT,
                f"Amount currency {amount.currency.code} does not match account currency {self._currency.code}"
            )
        if not amount.is_positive():
            raise LedgerError(AccountError.INVALID_AMOUNT)
    
    def credit(self, amount: Money, timestamp: datetime) -> TransactionRecord:
        """
        Deposit `amount` and record it.
        
        Raises:
            LedgerError: INVALID_AMOUNT if amount is not positive or the
                resulting balance exceeds the supported precision
        """
        with self._lock:
            self._check_amount(amount)
            try:
                new_balance = self._balance + amount
            except InvalidOperation:
                raise LedgerError(
                    AccountError.INVALID_AMOUNT,
                    "Amount would push the balance past the supported precision."
                ) from None
            self._balance = new_balance
            record = TransactionRecord(timestamp, TransactionKind.DEPOSIT, amount, self._balance)
            self._history.append(record)
            return record
    
    def debit(self, amount: Money, timestamp: datetime) -> TransactionRecord:
        """
        Withdraw `amount` and record it. The balance may reach exactly zero.
        
        Raises:
            LedgerError: INVALID_AMOUNT if amount is not positive,
                INSUFFICIENT_FUNDS if amount exceeds the balance
        """
        with self._lock:
            self._check_amount(amount)
            if amount > self._balance:
                raise LedgerError(AccountError.INSUFFICIENT_FUNDS)
            self._balance = self._balance - amount
            record = TransactionRecord(timestamp, TransactionKind.WITHDRAWAL, amount, self._balance)
            self._history.append(record)
            return record
