"""
Account Directory Module

Registry of accounts indexed by unique account number and by the
non-unique lowercase owner name. Both indexes and the account number
sequence are guarded by one lock so they always change together.
"""

import threading
from typing import Dict, List, Optional, Union

from .accounts import Account, common_name
from .audit import AuditTrail, AuditEventType
from .config import LedgerConfig, get_config
from .exceptions import AccountNotFoundError, AmbiguousAccountError, InvalidPartyError
from .logging_config import get_logger, log_action


AccountRef = Union[Account, str]


class AccountDirectory:
    """
    Creates, finds and removes accounts

    A host builds one directory and hands it to every component that needs
    accounts; separate directories share nothing.
    """

    def __init__(
        self,
        config: Optional[LedgerConfig] = None,
        audit_trail: Optional[AuditTrail] = None
    ):
        self.config = config or get_config()
        if audit_trail is None and self.config.enable_audit_logging:
            audit_trail = AuditTrail()
        self.audit_trail = audit_trail
        self.logger = get_logger("bank_ledger.directory")

        self._by_number: Dict[str, Account] = {}
        self._by_common_name: Dict[str, List[Account]] = {}
        self._sequence = 0
        self._lock = threading.RLock()

    @property
    def lock(self) -> threading.RLock:
        """Lock guarding the sequence and both indexes"""
        return self._lock

    @property
    def prefix(self) -> str:
        return self.config.account_number_prefix

    def format_account_number(self, sequence: int) -> str:
        """Format a sequence number, eg. 1522 -> 20172019-00001522"""
        return f"{self.prefix}-{sequence:0{self.config.account_number_width}d}"

    def is_account_number(self, key: str) -> bool:
        """Check if a removal key should be treated as an account number"""
        return key.startswith(self.prefix)

    def create_account(
        self,
        owner_name: str,
        birth_date: str,
        mothers_maiden_name: str
    ) -> Account:
        """
        Create a new account and index it by number and by owner name

        Args:
            owner_name: Display name of the owner
            birth_date: Owner birth date, YYYY-MM-DD, not validated
            mothers_maiden_name: Secret recovery field

        Returns:
            The registered Account with zero balance
        """
        with self._lock:
            self._sequence += 1
            account_number = self.format_account_number(self._sequence)

            account = Account(
                account_number=account_number,
                owner_name=owner_name,
                owner_common_name=common_name(owner_name),
                owner_birthdate=birth_date,
                owner_mothers_maiden_name=mothers_maiden_name,
                directory=self
            )

            self._by_number[account_number] = account
            self._by_common_name.setdefault(account.owner_common_name, []).append(account)

        log_action(
            self.logger, "info", "Account created",
            action="create_account", account_number=account_number,
            owner_name=owner_name
        )

        if self.audit_trail:
            self.audit_trail.log_event(
                event_type=AuditEventType.ACCOUNT_CREATED,
                entity_type="account",
                entity_id=account_number,
                metadata={
                    "owner_name": owner_name,
                    "owner_birthdate": birth_date
                }
            )

        return account

    def get_account_by_number(self, key: str) -> Optional[Account]:
        """
        Get account by account number

        A bare sequence suffix such as "00000001" also matches.
        """
        with self._lock:
            account = self._by_number.get(key)
            if account is None:
                account = self._by_number.get(f"{self.prefix}-{key}")
            return account

    def get_accounts_by_name(self, search_name: str) -> List[Account]:
        """
        Get accounts whose owner name is, or contains, search_name

        Matching is case-insensitive. An exact name hit returns only that
        name's accounts; otherwise every name containing the search string
        contributes its accounts. The returned list is always a new list.
        """
        search_name = common_name(search_name)
        with self._lock:
            bucket = self._by_common_name.get(search_name)
            if bucket is not None:
                return list(bucket)

            result: List[Account] = []
            for name, accounts in self._by_common_name.items():
                if search_name in name:
                    result.extend(accounts)
            return result

    def remove_account(self, name_or_number: str) -> Account:
        """
        Remove an account from the directory

        Args:
            name_or_number: Account number (starting with the prefix) or owner name

        Returns:
            The removed Account

        Raises:
            AmbiguousAccountError: The name matches several accounts
            AccountNotFoundError: Nothing matches
        """
        with self._lock:
            account: Optional[Account] = None
            if self.is_account_number(name_or_number):
                account = self.get_account_by_number(name_or_number)
            else:
                matches = self.get_accounts_by_name(name_or_number)
                if len(matches) > 1:
                    log_action(
                        self.logger, "warning", "Ambiguous account removal",
                        action="remove_account", search=name_or_number,
                        candidates=[a.account_number for a in matches]
                    )
                    raise AmbiguousAccountError(
                        f"Multiple accounts match '{name_or_number}', choose an account number",
                        [a.summary() for a in matches]
                    )
                if matches:
                    account = matches[0]

            if account is None:
                raise AccountNotFoundError(f"Account {name_or_number} not found")

            del self._by_number[account.account_number]
            bucket = [a for a in self._by_common_name[account.owner_common_name] if a is not account]
            if bucket:
                self._by_common_name[account.owner_common_name] = bucket
            else:
                del self._by_common_name[account.owner_common_name]
        log_action(
            self.logger, "info", "Account removed",
            action="remove_account", account_number=account.account_number,
            balance=str(account.balance)
        )

        if self.audit_trail:
            self.audit_trail.log_event(
                event_type=AuditEventType.ACCOUNT_REMOVED,
                entity_type="account",
                entity_id=account.account_number,
                metadata={
                    "owner_name": account.owner_name,
                    "balance": account.balance
                }
            )

        return account

    def list_accounts(self) -> List[Account]:
        """Get every registered account in creation order"""
        with self._lock:
            return list(self._by_number.values())

    def resolve(self, ref: AccountRef) -> Account:
        """
        Resolve an account handle or account number to a registered account

        Raises:
            InvalidPartyError: The reference does not resolve to an account
                registered in this directory
        """
        if isinstance(ref, Account):
            with self._lock:
                if self._by_number.get(ref.account_number) is ref:
                    return ref
            raise InvalidPartyError(
                f"Account {ref.account_number} is not registered in this directory"
            )

        if not isinstance(ref, str):
            raise InvalidPartyError(f"Cannot resolve account reference {ref!r}")

        account = self.get_account_by_number(ref)
        if account is None:
            raise InvalidPartyError(f"Account {ref} not found")
        return account

    def __len__(self) -> int:
        with self._lock:
            return len(self._by_number)

    def __contains__(self, item: object) -> bool:
        if isinstance(item, Account):
            with self._lock:
                return self._by_number.get(item.account_number) is item
        if isinstance(item, str):
            return self.get_account_by_number(item) is not None
        return False
