"""
Ledger Exceptions

Error taxonomy shared by the directory, the transfer protocol and the
account entity. Every error is recoverable by the caller.
"""

from decimal import Decimal
from typing import List, TYPE_CHECKING

if TYPE_CHECKING:
    from .accounts import AccountSummary


class LedgerError(Exception):
    """Base exception for all ledger errors"""


class AccountNotFoundError(LedgerError):
    """Raised when a lookup that requires an account finds none"""


class InvalidPartyError(AccountNotFoundError):
    """Raised when a transfer sender or recipient does not resolve to an account"""


class AmbiguousAccountError(LedgerError):
    """
    Raised when a name matches more than one account where exactly one is required.
    The candidates let the caller pick the right account number.
    """

    def __init__(self, message: str, candidates: List['AccountSummary']):
        super().__init__(message)
        self.candidates = list(candidates)


class InsufficientFundsError(LedgerError):
    """Raised when a transfer would drive the sender's balance negative"""

    def __init__(self, account_number: str, balance: Decimal, requested: Decimal):
        super().__init__(
            f"Insufficient funds in {account_number}: "
            f"balance {balance}, requested {requested}"
        )
        self.account_number = account_number
        self.balance = balance
        self.requested = requested


class InvalidAmountError(LedgerError):
    """Raised when an amount is not numeric or not allowed for the operation"""
