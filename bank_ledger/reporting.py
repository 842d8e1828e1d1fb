"""
Reporting Module

Read-only views over the directory: total capital, a point-in-time
ledger of every account, and a conservation check that balances match
their histories. Nothing here is cached.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, List

from .directory import AccountDirectory


@dataclass(frozen=True)
class LedgerRow:
    """One account in a ledger snapshot"""
    account_number: str
    owner_name: str
    balance: Decimal


class ReportingEngine:
    """
    Aggregates balances across all accounts of a directory
    """

    def __init__(self, directory: AccountDirectory):
        self.directory = directory

    def total_capital(self) -> Decimal:
        """Sum of all account balances"""
        with self.directory.lock:
            return sum(
                (account.balance for account in self.directory.list_accounts()),
                Decimal("0")
            )

    def current_ledger(self) -> List[LedgerRow]:
        """Account number, owner and balance of every account, as of now"""
        with self.directory.lock:
            return [
                LedgerRow(
                    account_number=account.account_number,
                    owner_name=account.owner_name,
                    balance=account.balance
                )
                for account in self.directory.list_accounts()
            ]

    def verify_conservation(self) -> Dict[str, Any]:
        """
        Check that every balance equals the sum of its history

        Returns:
            Dictionary with the check results and any discrepancies
        """
        result = {
            'valid': True,
            'total_capital': Decimal("0"),
            'history_total': Decimal("0"),
            'discrepancies': []
        }

        with self.directory.lock:
            for account in self.directory.list_accounts():
                history_total = account.history_total()
                result['total_capital'] += account.balance
                result['history_total'] += history_total

                if account.balance != history_total:
                    result['valid'] = False
                    result['discrepancies'].append({
                        'account_number': account.account_number,
                        'balance': account.balance,
                        'history_total': history_total
                    })

        return result
