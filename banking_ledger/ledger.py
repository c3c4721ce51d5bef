"""
Ledger Controller Module

Owns the account registry and is the only component that mutates account
balances. Every operation returns a Result; expected failures (unknown user,
duplicate username, bad amount, insufficient funds) are reported as error
kinds, never raised.
"""

from decimal import Decimal, InvalidOperation
from datetime import datetime
from typing import Callable, Optional, Union

from .accounts import Account, TransactionRecord
from .config import LedgerConfig, get_config
from .credentials import CredentialHasher
from .currency import Money, currency_from_code
from .errors import AccountError, LedgerError, MalformedCredentialRecord, Result
from .logging_config import get_logger, log_action
from .storage import AccountStore, InMemoryAccountStore


AmountLike = Union[Money, Decimal, int, str]


def _local_now() -> datetime:
    return datetime.now().astimezone()


class LedgerController:
    """
    Account registration, authentication, deposits and withdrawals.
    
    Deposits and withdrawals are applied under the account's lock so that
    the balance change and its history record form one atomic unit.
    """
    
    def __init__(
        self,
        store: Optional[AccountStore] = None,
        hasher: Optional[CredentialHasher] = None,
        config: Optional[LedgerConfig] = None,
        clock: Optional[Callable[[], datetime]] = None
    ):
        self.config = config or get_config()
        self.store = store if store is not None else InMemoryAccountStore()
        self.hasher = hasher or CredentialHasher.from_config(self.config)
        self.currency = currency_from_code(self.config.currency)
        self.clock = clock or _local_now
        self.logger = get_logger("banking_ledger.ledger")
    
    def _failure(self, action: str, username: str, error: AccountError,
                 message: Optional[str] = None) -> Result:
        result = Result.failure(error, message)
        log_action(
            self.logger, "warning", f"{action} failed: {error.value}",
            username=username, action=action, resource=f"account:{username}",
            extra={"error": error.value}
        )
        return result
    
    def _to_money(self, amount: AmountLike) -> Optional[Money]:
        """Coerce to a Money in the ledger currency, or None if not a usable number"""
        if isinstance(amount, Money):
            return amount if amount.currency == self.currency else None
        if isinstance(amount, bool):
            return None
        try:
            value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
            if not value.is_finite():
                return None
            # Rounding to cents fails past the context precision
            return Money(value, self.currency)
        except (InvalidOperation, ValueError):
            return None
    
    # Registration and authentication
    
    def create_account(self, username: str, password: str) -> Result:
        """
        Register a new account with zero balance and empty history.
        
        Returns:
            Result with no value on success, DUPLICATE_USERNAME if taken
        """
        if self.store.exists(username):
            return self._failure("create_account", username, AccountError.DUPLICATE_USERNAME)
        
        # Hash outside the store lock; add() settles concurrent registrations
        account = Account(
            username=username,
            password_hash=self.hasher.hash(password),
            currency=self.currency,
            created_at=self.clock()
        )
        if not self.store.add(account):
            return self._failure("create_account", username, AccountError.DUPLICATE_USERNAME)
        
        log_action(
            self.logger, "info", "Account created",
            username=username, action="create_account", resource=f"account:{username}",
            extra={"currency": self.currency.code}
        )
        return Result.success()
    
    def login(self, username: str, password: str) -> Result:
        """
        Check credentials.
        
        Returns:
            Result whose value is True on a match and False on a wrong password;
            UNKNOWN_USERNAME if no such account
        """
        account = self.store.get(username)
        if account is None:
            return self._failure("login", username, AccountError.UNKNOWN_USERNAME)
        
        try:
            self.hasher.decode(account.password_hash)
        except MalformedCredentialRecord as e:
            log_action(
                self.logger, "error", "Stored credential record could not be decoded",
                username=username, action="login", resource=f"account:{username}",
                extra={"error": e.error.value}
            )
            return Result.failure(e.error, e.message)
        
        matched = self.hasher.verify(password, account.password_hash)
        log_action(
            self.logger, "info" if matched else "warning",
            "Login succeeded" if matched else "Login failed: credentials did not match",
            username=username, action="login", resource=f"account:{username}",
            extra={"matched": matched}
        )
        return Result.success(matched)
    
    # Queries
    
    def has_account(self, username: str) -> bool:
        return self.store.exists(username)
    
    def account_count(self) -> int:
        return self.store.count()
    
    def balance_of(self, username: str) -> Result:
        """Current balance as Money, or UNKNOWN_USERNAME"""
        account = self.store.get(username)
        if account is None:
            return Result.failure(AccountError.UNKNOWN_USERNAME)
        return Result.success(account.balance)
    
    def transactions_of(self, username: str) -> Result:
        """Typed history as a tuple of TransactionRecord, oldest first"""
        account = self.store.get(username)
        if account is None:
            return Result.failure(AccountError.UNKNOWN_USERNAME)
        return Result.success(account.history)
    
    def history_of(self, username: str) -> Result:
        """Rendered history lines as a tuple of str, oldest first"""
        result = self.transactions_of(username)
        if not result.ok:
            return result
        fmt = self.config.history_timestamp_format
        return Result.success(tuple(record.render(fmt) for record in result.value))
    
    # Balance mutations
    
    def _apply(self, action: str, username: str, amount: AmountLike,
               operation: Callable[[Account, Money, datetime], TransactionRecord]) -> Result:
        account = self.store.get(username)
        if account is None:
            return self._failure(action, username, AccountError.UNKNOWN_USERNAME)
        
        money = self._to_money(amount)
        if money is None:
            return self._failure(action, username, AccountError.INVALID_AMOUNT)
        
        try:
            record = operation(account, money, self.clock())
        except LedgerError as e:
            return self._failure(action, username, e.error, e.message)
        
        log_action(
            self.logger, "info", f"{record.kind.value} posted",
            username=username, action=action, resource=f"account:{username}",
            extra={
                "amount": record.amount.to_string(),
                "balance": record.balance.to_string()
            }
        )
        return Result.success(record.balance)
    
    def deposit(self, username: str, amount: AmountLike) -> Result:
        """
        Add a positive amount to the account.
        
        Returns:
            Result with the new balance; UNKNOWN_USERNAME or INVALID_AMOUNT on failure
        """
        return self._apply("deposit", username, amount, Account.credit)
    
    def withdraw(self, username: str, amount: AmountLike) -> Result:
        """
        Remove a positive amount not exceeding the balance.
        
        Returns:
            Result with the new balance; UNKNOWN_USERNAME, INVALID_AMOUNT or
            INSUFFICIENT_FUNDS on failure
        """
        return self._apply("withdraw", username, amount, Account.debit)
