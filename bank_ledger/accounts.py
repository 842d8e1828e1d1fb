"""
Account Module

The account entity: owner identity, balance, and the append-only history
of balance changes. Accounts become visible to lookups only when created
through an AccountDirectory.
"""

from decimal import Decimal, InvalidOperation
from datetime import datetime, timezone
from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple, Union, TYPE_CHECKING

from .exceptions import InvalidAmountError, InvalidPartyError

if TYPE_CHECKING:
    from .directory import AccountDirectory


AmountLike = Union[Decimal, int, float, str]

ANONYMOUS_OWNER = "anonymous bank account"
UNKNOWN_BIRTHDATE = "0000-00-00"
UNASSIGNED_ACCOUNT_NUMBER = "20172019-00000000"


def common_name(name: str) -> str:
    """Lowercase form of an owner name used as the name index key"""
    return name.lower()


def to_amount(value: Any) -> Decimal:
    """
    Coerce a monetary value to Decimal.
    Floats go through str() so 0.1 stays 0.1.
    """
    if isinstance(value, bool):
        raise InvalidAmountError(f"Invalid amount: {value!r}")
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, float):
        amount = Decimal(str(value))
    elif isinstance(value, (int, str)):
        try:
            amount = Decimal(value)
        except InvalidOperation:
            raise InvalidAmountError(f"Invalid amount: {value!r}") from None
    else:
        raise InvalidAmountError(f"Invalid amount: {value!r}")

    if not amount.is_finite():
        raise InvalidAmountError(f"Amount must be finite: {value!r}")
    return amount


@dataclass(frozen=True)
class HistoryEntry:
    """One balance mutation, immutable once recorded"""
    timestamp: datetime
    amount: Decimal              # Negative = debit, positive = credit
    balance_after: Decimal
    transaction_id: str
    counterparty: str            # Free text naming the other party
    remark: str = ""

    @property
    def iso_timestamp(self) -> str:
        return self.timestamp.isoformat()

    @property
    def epoch_millis(self) -> int:
        return int(self.timestamp.timestamp() * 1000)


@dataclass(frozen=True)
class AccountSummary:
    """Identifying fields shown to a caller choosing between accounts"""
    name: str
    birthdate: str
    account_number: str


@dataclass(eq=False)
class Account:
    """
    Bank account with balance and transaction history

    A bare Account() is a blank placeholder that no directory knows about.
    History only grows through apply_balance_change; readers get tuples.
    Use AccountDirectory.create_account to get a registered account.
    """
    account_number: str = UNASSIGNED_ACCOUNT_NUMBER
    owner_name: str = ANONYMOUS_OWNER
    owner_common_name: str = ""
    owner_birthdate: str = UNKNOWN_BIRTHDATE
    owner_mothers_maiden_name: str = ""
    balance: Decimal = Decimal("0")
    _history: List[HistoryEntry] = field(default_factory=list, repr=False)
    directory: Optional['AccountDirectory'] = field(default=None, repr=False)  # Directory that created it

    @property
    def entries(self) -> Tuple[HistoryEntry, ...]:
        """Snapshot of the history, oldest first"""
        return tuple(self._history)

    @property
    def history(self) -> Tuple[HistoryEntry, ...]:
        return self.entries

    @property
    def is_registered(self) -> bool:
        """Check if the account is currently held by its directory"""
        return self.directory is not None and self in self.directory

    @property
    def party_descriptor(self) -> str:
        """How this account is named in the other party's history"""
        return f"{self.owner_name}@{self.account_number}"

    def apply_balance_change(
        self,
        amount: AmountLike,
        counterparty: str,
        transaction_id: str,
        remark: str = ""
    ) -> 'Account':
        """
        Add a signed amount to the balance and record it in the history

        No funds check happens here; transfers validate before calling this.

        Args:
            amount: Negative withdraws, positive deposits, zero is allowed
            counterparty: The other party in this change
            transaction_id: Identifier shared by all legs of one transaction
            remark: Optional free text

        Returns:
            This account, for chaining
        """
        amount = to_amount(amount)
        self.balance += amount
        self._history.append(HistoryEntry(
            timestamp=datetime.now(timezone.utc),
            amount=amount,
            balance_after=self.balance,
            transaction_id=transaction_id,
            counterparty=counterparty,
            remark=remark or ""
        ))
        return self

    def transfer_to(
        self,
        recipient: Union['Account', str],
        amount: AmountLike,
        remark: str = ""
    ) -> str:
        """Transfer funds from this account to another, returns the transaction id"""
        if self.directory is None:
            raise InvalidPartyError(
                f"Account {self.account_number} was never registered in a directory"
            )
        # A removed account still points at its directory, which rejects it in resolve()
        from .transactions import TransferProcessor
        return TransferProcessor(self.directory).transfer(self, recipient, amount, remark)

    def history_total(self) -> Decimal:
        """Sum of all amounts ever applied to this account"""
        return sum((entry.amount for entry in self._history), Decimal("0"))

    def summary(self) -> AccountSummary:
        return AccountSummary(
            name=self.owner_name,
            birthdate=self.owner_birthdate,
            account_number=self.account_number
        )
