"""
Currency Support Module

Handles ISO 4217 currency codes and proper Decimal precision for ledger
amounts. NEVER uses float for monetary values.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, getcontext
from dataclasses import dataclass
from enum import Enum
import re

# Set global decimal context for financial precision
getcontext().prec = 28  # High precision for financial calculations

class Currency(Enum):
    """ISO 4217 Currency Codes with precision and display symbol"""
    USD = ("USD", 2, "$")   # US Dollar
    EUR = ("EUR", 2, "€")   # Euro
    GBP = ("GBP", 2, "£")   # British Pound
    CAD = ("CAD", 2, "CA$") # Canadian Dollar
    CHF = ("CHF", 2, "CHF ")  # Swiss Franc
    
    def __init__(self, code: str, precision: int, symbol: str):
        self.code = code
        self.precision = precision
        self.symbol = symbol

@dataclass(frozen=True)
class Money:
    """
    Immutable money representation with currency and proper precision.
    All ledger amounts MUST use this class or raw Decimal.
    """
    amount: Decimal
    currency: Currency
    
    def __post_init__(self):
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, 'amount', Decimal(str(self.amount)))
        
        # Round to currency precision
        rounded = self.amount.quantize(
            Decimal('0.1') ** self.currency.precision,
            rounding=ROUND_HALF_UP
        )
        object.__setattr__(self, 'amount', rounded)
    
    @classmethod
    def zero(cls, currency: Currency) -> 'Money':
        return cls(Decimal('0'), currency)
    
    def __add__(self, other: 'Money') -> 'Money':
        if self.currency != other.currency:
            raise ValueError(f"Cannot add {self.currency.code} and {other.currency.code}")
        return Money(self.amount + other.amount, self.currency)
    
    def __sub__(self, other: 'Money') -> 'Money':
        if self.currency != other.currency:
            raise ValueError(f"Cannot subtract {other.currency.code} from {self.currency.code}")
        return Money(self.amount - other.amount, self.currency)
    
    def __eq__(self, other) -> bool:
        if not isinstance(other, Money):
            return False
        return self.amount == other.amount and self.currency == other.currency
    
    def __hash__(self) -> int:
        return hash((self.amount, self.currency))
    
    def __lt__(self, other: 'Money') -> bool:
        if self.currency != other.currency:
            raise ValueError(f"Cannot compare {self.currency.code} and {other.currency.code}")
        return self.amount < other.amount
    
    def __le__(self, other: 'Money') -> bool:
        if self.currency != other.currency:
            raise ValueError(f"Cannot compare {self.currency.code} and {other.currency.code}")
        return self.amount <= other.amount
    
    def __gt__(self, other: 'Money') -> bool:
        if self.currency != other.currency:
            raise ValueError(f"Cannot compare {self.currency.code} and {other.currency.code}")
        return self.amount > other.amount
    
    def __ge__(self, other: 'Money') -> bool:
        if self.currency != other.currency:
            raise ValueError(f"Cannot compare {self.currency.code} and {other.currency.code}")
        return self.amount >= other.amount
    
    def is_zero(self) -> bool:
        """Check if amount is exactly zero"""
        return self.amount == Decimal('0')
    
    def is_positive(self) -> bool:
        """Check if amount is positive"""
        return self.amount > Decimal('0')
    
    def is_negative(self) -> bool:
        """Check if amount is negative"""
        return self.amount < Decimal('0')
    
    def to_string(self) -> str:
        """Format with ISO code, e.g. 'USD 1,234.50'"""
        return f"{self.currency.code} {self.amount:,.{self.currency.precision}f}"
    
    def to_display(self) -> str:
        """Format with currency symbol, e.g. '$1,234.50' or '-$5.00'"""
        sign = "-" if self.is_negative() else ""
        return f"{sign}{self.currency.symbol}{abs(self.amount):,.{self.currency.precision}f}"

def currency_from_code(code: str) -> Currency:
    """
    Look up a currency by ISO code (case-insensitive)
    
    Raises:
        ValueError: If the code is not a supported currency
    """
    try:
        return Currency[code.strip().upper()]
    except KeyError:
        raise ValueError(f"Unsupported currency code '{code}'") from None

def decimal_from_string(value: str) -> Decimal:
    """
    Safely convert string to Decimal, handling common formats
    
    Args:
        value: String representation of number
        
    Returns:
        Decimal value
        
    Raises:
        ValueError: If string cannot be converted to valid Decimal
    """
    if not value or not isinstance(value, str):
        raise ValueError("Value must be a non-empty string")
    
    # Remove currency symbols and whitespace
    clean_value = re.sub(r'[^\d.,\-+]', '', value.strip())
    
    # Handle comma as decimal separator (European format)
    if ',' in clean_value and '.' in clean_value:
        # Both comma and dot - assume comma is thousands separator
        clean_value = clean_value.replace(',', '')
    elif ',' in clean_value and clean_value.count(',') == 1:
        # Single comma - could be decimal separator
        parts = clean_value.split(',')
        if len(parts[1]) <= 2:  # Likely decimal separator
            clean_value = clean_value.replace(',', '.')
        else:  # Likely thousands separator
            clean_value = clean_value.replace(',', '')
    
    try:
        result = Decimal(clean_value)
    except InvalidOperation:
        raise ValueError(f"Cannot convert '{value}' to Decimal") from None
    if not result.is_finite():
        raise ValueError(f"Cannot convert '{value}' to Decimal")
    return result

def validate_decimal_precision(value: Decimal, currency: Currency) -> Decimal:
    """
    Validate and round decimal to currency precision
    
    Args:
        value: Decimal to validate
        currency: Currency defining precision
        
    Returns:
        Properly rounded Decimal
    """
    return value.quantize(
        Decimal('0.1') ** currency.precision,
        rounding=ROUND_HALF_UP
    )
