"""
Account Store Module

Provides the abstract account-store interface and a thread-safe in-memory
implementation keyed by exact (case-sensitive) username.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional
import threading

from .accounts import Account


class AccountStore(ABC):
    """Abstract interface for account registries"""
    
    @abstractmethod
    def add(self, account: Account) -> bool:
        """Insert the account unless its username is taken; return whether it was inserted"""
        pass
    
    @abstractmethod
    def get(self, username: str) -> Optional[Account]:
        """Return the account with exactly this username, if any"""
        pass
    
    @abstractmethod
    def exists(self, username: str) -> bool:
        """Check if an account with this username exists"""
        pass
    
    @abstractmethod
    def usernames(self) -> List[str]:
        """List registered usernames in registration order"""
        pass
    
    @abstractmethod
    def count(self) -> int:
        """Count registered accounts"""
        pass
    
    def close(self) -> None:
        """Release store resources (default no-op)"""
        pass


class InMemoryAccountStore(AccountStore):
    """In-memory account store"""
    
    def __init__(self):
        self._accounts: Dict[str, Account] = {}
        self._lock = threading.RLock()
    
    def add(self, account: Account) -> bool:
        with self._lock:
            if account.username in self._accounts:
                return False
            self._accounts[account.username] = account
            return True
    
    def get(self, username: str) -> Optional[Account]:
        with self._lock:
            return self._accounts.get(username)
    
    def exists(self, username: str) -> bool:
        with self._lock:
            return username in self._accounts
    
    def usernames(self) -> List[str]:
        with self._lock:
            return list(self._accounts)
    
    def count(self) -> int:
        with self._lock:
            return len(self._accounts)
