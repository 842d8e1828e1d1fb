"""
Ledger System Module

Wires the directory, transfer processor, reporting engine and audit
trail together for a host application.
"""

from decimal import Decimal
from typing import List, Optional

from .accounts import Account, AmountLike
from .audit import AuditTrail
from .config import LedgerConfig, get_config
from .directory import AccountDirectory, AccountRef
from .logging_config import setup_logging
from .reporting import LedgerRow, ReportingEngine
from .transactions import TransferProcessor


class LedgerSystem:
    """Bank ledger with all components initialized"""

    def __init__(self, config: Optional[LedgerConfig] = None, configure_logging: bool = False):
        self.config = config or get_config()

        if configure_logging:
            setup_logging(self.config)

        self.audit_trail = AuditTrail() if self.config.enable_audit_logging else None
        self.directory = AccountDirectory(self.config, self.audit_trail)
        self.transfer_processor = TransferProcessor(self.directory)
        self.reporting_engine = ReportingEngine(self.directory)

    def create_account(self, owner_name: str, birth_date: str, mothers_maiden_name: str) -> Account:
        return self.directory.create_account(owner_name, birth_date, mothers_maiden_name)

    def get_account_by_number(self, key: str) -> Optional[Account]:
        return self.directory.get_account_by_number(key)

    def get_accounts_by_name(self, search_name: str) -> List[Account]:
        return self.directory.get_accounts_by_name(search_name)

    def remove_account(self, name_or_number: str) -> Account:
        return self.directory.remove_account(name_or_number)

    def list_accounts(self) -> List[Account]:
        return self.directory.list_accounts()

    def transfer(self, sender: AccountRef, recipient: AccountRef,
                 amount: AmountLike, remark: str = "") -> str:
        return self.transfer_processor.transfer(sender, recipient, amount, remark)

    def deposit(self, account: AccountRef, amount: AmountLike,
                counterparty: str, remark: str = "") -> str:
        return self.transfer_processor.deposit(account, amount, counterparty, remark)

    def total_capital(self) -> Decimal:
        return self.reporting_engine.total_capital()

    def current_ledger(self) -> List[LedgerRow]:
        return self.reporting_engine.current_ledger()
