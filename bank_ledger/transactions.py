"""
Transaction Processing Module

Transfers move funds between two accounts as one unit: both legs are
applied under the directory lock with a shared transaction id, or the
transfer fails before either leg is touched. Unilateral deposits seed
capital into a single account.
"""

import time
import uuid

from .accounts import Account, AmountLike, to_amount
from .audit import AuditEventType
from .directory import AccountDirectory, AccountRef
from .exceptions import InsufficientFundsError, InvalidAmountError, LedgerError
from .logging_config import get_logger, log_action


def generate_transaction_id() -> str:
    """
    Return a practically unique transaction id: random hex, then epoch millis.
    Not suitable as a secret.
    """
    return f"{uuid.uuid4().hex[:12]}-{int(time.time() * 1000)}"


class TransferProcessor:
    """
    Applies transfers and deposits to accounts held by a directory
    """

    def __init__(self, directory: AccountDirectory):
        self.directory = directory
        self.config = directory.config
        self.audit_trail = directory.audit_trail
        self.logger = get_logger("bank_ledger.transactions")

    def transfer(
        self,
        sender: AccountRef,
        recipient: AccountRef,
        amount: AmountLike,
        remark: str = ""
    ) -> str:
        """
        Transfer funds between accounts

        Args:
            sender: Account handle or account number to debit
            recipient: Account handle or account number to credit
            amount: Amount to move
            remark: Free text recorded on both legs

        Returns:
            Transaction id shared by the debit and credit entries

        Raises:
            InvalidPartyError: Sender or recipient not found
            InsufficientFundsError: Sender balance would go negative
            InvalidAmountError: Amount is not numeric, or not positive when
                reject_non_positive_transfers is set
        """
        try:
            with self.directory.lock:
                from_account = self.directory.resolve(sender)
                to_account = self.directory.resolve(recipient)
                amount = to_amount(amount)

                if self.config.reject_non_positive_transfers and amount <= 0:
                    raise InvalidAmountError(f"Transfer amount must be positive, got {amount}")

                if from_account.balance - amount < 0:
                    raise InsufficientFundsError(
                        from_account.account_number, from_account.balance, amount
                    )

                transaction_id = generate_transaction_id()
                from_account.apply_balance_change(
                    -amount, to_account.party_descriptor, transaction_id, remark
                )
                to_account.apply_balance_change(
                    amount, from_account.party_descriptor, transaction_id, remark
                )
        except LedgerError as e:
            self._reject(sender, recipient, amount, e)
            raise

        log_action(
            self.logger, "info", "Transfer posted",
            action="transfer", account_number=from_account.account_number,
            transaction_id=transaction_id,
            to_account=to_account.account_number, amount=str(amount)
        )

        if self.audit_trail:
            self.audit_trail.log_event(
                event_type=AuditEventType.TRANSFER_POSTED,
                entity_type="transfer",
                entity_id=transaction_id,
                metadata={
                    "from_account": from_account.account_number,
                    "to_account": to_account.account_number,
                    "amount": amount,
                    "remark": remark
                }
            )

        return transaction_id

    def deposit(
        self,
        account: AccountRef,
        amount: AmountLike,
        counterparty: str,
        remark: str = ""
    ) -> str:
        """
        Apply a unilateral balance change, eg. initial capital or cash deposit.
        No funds check is made, so a negative amount debits unconditionally.

        Returns:
            Transaction id of the single history entry
        """
        with self.directory.lock:
            target = self.directory.resolve(account)
            amount = to_amount(amount)
            transaction_id = generate_transaction_id()
            target.apply_balance_change(amount, counterparty, transaction_id, remark)

        log_action(
            self.logger, "info", "Balance changed",
            action="deposit", account_number=target.account_number,
            transaction_id=transaction_id,
            amount=str(amount), counterparty=counterparty
        )

        if self.audit_trail:
            self.audit_trail.log_event(
                event_type=AuditEventType.BALANCE_CHANGED,
                entity_type="account",
                entity_id=target.account_number,
                metadata={
                    "transaction_id": transaction_id,
                    "amount": amount,
                    "counterparty": counterparty,
                    "remark": remark
                }
            )

        return transaction_id

    def _reject(self, sender: AccountRef, recipient: AccountRef, amount, error: LedgerError) -> None:
        """Record a failed transfer"""
        from_ref = sender.account_number if isinstance(sender, Account) else str(sender)
        to_ref = recipient.account_number if isinstance(recipient, Account) else str(recipient)

        log_action(
            self.logger, "warning", f"Transfer rejected: {error}",
            action="transfer", account_number=from_ref,
            to_account=to_ref, amount=str(amount), error=type(error).__name__
        )

        if self.audit_trail:
            self.audit_trail.log_event(
                event_type=AuditEventType.TRANSFER_REJECTED,
                entity_type="transfer",
                entity_id=generate_transaction_id(),
                metadata={
                    "from_account": from_ref,
                    "to_account": to_ref,
                    "amount": str(amount),
                    "reason": str(error)
                }
            )
