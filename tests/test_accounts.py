"""
Test suite for accounts module

Tests the Account entity invariants: non-negative balance, one history
record per balance change, and history that cannot be mutated from outside.
"""

import pytest
from decimal import Decimal
from datetime import datetime, timezone

from banking_ledger.accounts import Account, TransactionKind, TransactionRecord
from banking_ledger.currency import Money, Currency
from banking_ledger.errors import AccountError, LedgerError


NOW = datetime(2024, 3, 15, 9, 30, 0, tzinfo=timezone.utc)


def usd(value: str) -> Money:
    return Money(Decimal(value), Currency.USD)


class TestTransactionRecord:
    """Test history record rendering"""
    
    def test_render(self):
        """Test the human-readable history line"""
        record = TransactionRecord(NOW, TransactionKind.DEPOSIT, usd('100'), usd('100'))
        assert record.render() == (
            "Friday, 15 March 2024 09:30:00 - Deposit of $100.00; New balance: $100.00"
        )
    
    def test_render_custom_format(self):
        """Test rendering with a custom timestamp format"""
        record = TransactionRecord(NOW, TransactionKind.WITHDRAWAL, usd('1234.5'), usd('0'))
        assert record.render("%Y-%m-%d") == (
            "2024-03-15 - Withdrawal of $1,234.50; New balance: $0.00"
        )


class TestAccount:
    """Test Account entity behaviour"""
    
    def setup_method(self):
        """Set up test fixtures"""
        self.account = Account("alice", "stored-hash", Currency.USD, created_at=NOW)
    
    def test_new_account_is_empty(self):
        """Test starting balance and history"""
        assert self.account.username == "alice"
        assert self.account.password_hash == "stored-hash"
        assert self.account.balance == usd('0')
        assert self.account.history == ()
        assert self.account.created_at == NOW
    
    def test_identity_is_read_only(self):
        """Test username and hash cannot be reassigned"""
        with pytest.raises(AttributeError):
            self.account.username = "mallory"
        with pytest.raises(AttributeError):
            self.account.password_hash = "other"
        with pytest.raises(AttributeError):
            self.account.balance = usd('1000000')
    
    def test_credit_and_debit(self):
        """Test balance changes and history records"""
        deposit = self.account.credit(usd('100'), NOW)
        withdrawal = self.account.debit(usd('40'), NOW)
        
        assert deposit.kind == TransactionKind.DEPOSIT
        assert deposit.balance == usd('100')
        assert withdrawal.kind == TransactionKind.WITHDRAWAL
        assert withdrawal.balance == usd('60')
        assert self.account.balance == usd('60')
        assert self.account.history == (deposit, withdrawal)
    
    def test_debit_to_exactly_zero(self):
        """Test that the whole balance can be withdrawn"""
        self.account.credit(usd('25.10'), NOW)
        self.account.debit(usd('25.10'), NOW)
        assert self.account.balance.is_zero()
    
    def test_overdraft_rejected_without_side_effects(self):
        """Test insufficient funds leaves state untouched"""
        self.account.credit(usd('10'), NOW)
        
        with pytest.raises(LedgerError) as exc_info:
            self.account.debit(usd('10.01'), NOW)
        
        assert exc_info.value.error == AccountError.INSUFFICIENT_FUNDS
        assert self.account.balance == usd('10')
        assert len(self.account.history) == 1
    
    @pytest.mark.parametrize("amount", ['0', '-5', '0.001'])
    def test_non_positive_amounts_rejected(self, amount):
        """Test zero and negative amounts are invalid for both directions"""
        for operation in (self.account.credit, self.account.debit):
            with pytest.raises(LedgerError) as exc_info:
                operation(usd(amount), NOW)
            assert exc_info.value.error == AccountError.INVALID_AMOUNT
        assert self.account.history == ()
    
    def test_currency_mismatch_rejected(self):
        """Test amounts in another currency are invalid"""
        with pytest.raises(LedgerError) as exc_info:
            self.account.credit(Money(Decimal('5'), Currency.EUR), NOW)
        assert exc_info.value.error == AccountError.INVALID_AMOUNT
    
    def test_history_snapshot_is_detached(self):
        """Test the returned history cannot alter the account"""
        self.account.credit(usd('1'), NOW)
        snapshot = self.account.history
        
        assert isinstance(snapshot, tuple)
        self.account.credit(usd('2'), NOW)
        assert len(snapshot) == 1
        assert len(self.account.history) == 2
    
    def test_repr_hides_hash(self):
        """Test repr does not expose the stored hash"""
        assert "stored-hash" not in repr(self.account)
