"""
Test suite for accounts module

Tests the account entity, balance changes, history entries and
amount coercion.
"""

import pytest
from decimal import Decimal
from datetime import datetime, timezone

from bank_ledger.accounts import (
    Account, AccountSummary, HistoryEntry, common_name, to_amount,
    ANONYMOUS_OWNER, UNASSIGNED_ACCOUNT_NUMBER
)
from bank_ledger.exceptions import InvalidAmountError, InvalidPartyError


class TestAccount:
    """Test Account entity functionality"""

    def test_blank_account_defaults(self):
        """Test a freshly constructed account is blank and unregistered"""
        account = Account()

        assert account.balance == Decimal('0')
        assert account.entries == ()
        assert account.owner_name == ANONYMOUS_OWNER
        assert account.owner_birthdate == "0000-00-00"
        assert account.account_number == UNASSIGNED_ACCOUNT_NUMBER
        assert not account.is_registered

    def test_blank_accounts_do_not_share_history(self):
        """Test each blank account gets its own history list"""
        first = Account()
        second = Account()

        first.apply_balance_change(10, "ATM", "T1")

        assert second.entries == ()

    def test_apply_balance_change_records_history(self):
        """Test a balance change updates balance and appends an entry"""
        account = Account()

        result = account.apply_balance_change(Decimal('150.00'), "ATM03223", "T1", "cash deposit")

        assert result is account
        assert account.balance == Decimal('150.00')
        assert len(account.entries) == 1

        entry = account.entries[0]
        assert entry.amount == Decimal('150.00')
        assert entry.balance_after == Decimal('150.00')
        assert entry.transaction_id == "T1"
        assert entry.counterparty == "ATM03223"
        assert entry.remark == "cash deposit"

    def test_balance_change_chaining(self):
        """Test balance changes can be chained"""
        account = Account().apply_balance_change(100, "A", "T1").apply_balance_change(-30, "B", "T2")

        assert account.balance == Decimal('70')
        assert [e.balance_after for e in account.entries] == [Decimal('100'), Decimal('70')]

    def test_zero_and_negative_changes_allowed(self):
        """Test the primitive applies zero and negative amounts without checks"""
        account = Account()

        account.apply_balance_change(0, "X", "T1")
        account.apply_balance_change(-25, "X", "T2")

        assert account.balance == Decimal('-25')
        assert len(account.entries) == 2

    def test_remark_defaults_to_empty(self):
        """Test missing remark is stored as empty string"""
        account = Account().apply_balance_change(5, "X", "T1")
        assert account.entries[0].remark == ""

    def test_balance_equals_history_total(self):
        """Test balance always equals the sum of history amounts"""
        account = Account()
        for amount in [100, -20, Decimal('0.05'), '12.50', -7]:
            account.apply_balance_change(amount, "X", "T")

        assert account.balance == account.history_total()
        assert account.balance == sum(e.amount for e in account.entries)
        assert account.balance == Decimal('85.55')

    def test_entries_snapshot_is_detached(self):
        """Test changing a history snapshot leaves the account unchanged"""
        account = Account().apply_balance_change(100, "ATM", "T1")

        snapshot = account.entries
        assert isinstance(snapshot, tuple)
        assert account.history == snapshot

        copied = list(snapshot)
        copied.clear()
        copied.append(snapshot[0])
        copied.append(snapshot[0])

        assert len(account.entries) == 1
        assert account.history_total() == Decimal('100')
        assert account.balance == account.history_total()

    def test_history_cannot_be_cleared(self):
        """Test the history view offers no mutation"""
        account = Account().apply_balance_change(100, "ATM", "T1")

        with pytest.raises(AttributeError):
            account.history.clear()
        with pytest.raises(AttributeError):
            account.entries.append(account.entries[0])

        assert len(account.entries) == 1

    def test_invalid_amount_leaves_account_unchanged(self):
        """Test a non-numeric amount is rejected before mutation"""
        account = Account().apply_balance_change(10, "X", "T1")

        with pytest.raises(InvalidAmountError):
            account.apply_balance_change("ten", "X", "T2")

        assert account.balance == Decimal('10')
        assert len(account.entries) == 1

    def test_transfer_to_requires_directory(self):
        """Test an unregistered account cannot transfer"""
        account = Account().apply_balance_change(10, "X", "T1")

        with pytest.raises(InvalidPartyError):
            account.transfer_to(Account(), 5)

        assert account.balance == Decimal('10')

    def test_summary(self):
        """Test account summary fields"""
        account = Account(
            account_number="20172019-00000007",
            owner_name="John Smith",
            owner_birthdate="1980-05-05"
        )

        assert account.summary() == AccountSummary(
            name="John Smith", birthdate="1980-05-05", account_number="20172019-00000007"
        )

    def test_party_descriptor(self):
        """Test the descriptor used in the other party's history"""
        account = Account(account_number="20172019-00000001", owner_name="Alice")
        assert account.party_descriptor == "Alice@20172019-00000001"

    def test_accounts_compare_by_identity(self):
        """Test two accounts with equal fields are still distinct"""
        assert Account() != Account()


class TestHistoryEntry:
    """Test HistoryEntry functionality"""

    def test_timestamp_forms(self):
        """Test ISO and epoch millisecond views of the timestamp"""
        when = datetime(2018, 2, 16, 12, 0, 0, 500000, tzinfo=timezone.utc)
        entry = HistoryEntry(
            timestamp=when, amount=Decimal('1'), balance_after=Decimal('1'),
            transaction_id="T1", counterparty="X"
        )

        assert entry.iso_timestamp == "2018-02-16T12:00:00.500000+00:00"
        assert entry.epoch_millis == 1518782400500

    def test_entries_are_immutable(self):
        """Test history entries cannot be modified"""
        entry = Account().apply_balance_change(1, "X", "T1").entries[0]

        with pytest.raises(AttributeError):
            entry.amount = Decimal('1000')

    def test_entry_timestamp_is_utc(self):
        """Test balance changes are stamped with the current UTC time"""
        before = datetime.now(timezone.utc)
        entry = Account().apply_balance_change(1, "X", "T1").entries[0]
        after = datetime.now(timezone.utc)

        assert before <= entry.timestamp <= after
        assert entry.timestamp.tzinfo is not None


class TestHelpers:
    """Test module helper functions"""

    def test_common_name_lowercases(self):
        assert common_name("KEMÉNY ANDRÁS ISTVÁN") == "kemény andrás istván"
        assert common_name("John Smith") == "john smith"

    def test_to_amount_accepts_numeric_types(self):
        """Test supported amount types convert exactly"""
        assert to_amount(Decimal('1.10')) == Decimal('1.10')
        assert to_amount(5) == Decimal('5')
        assert to_amount("12.34") == Decimal('12.34')
        assert to_amount(0.1) == Decimal('0.1')

    @pytest.mark.parametrize("value", ["abc", None, True, [1], "NaN", "Infinity", float("inf")])
    def test_to_amount_rejects_invalid(self, value):
        """Test invalid amounts raise InvalidAmountError"""
        with pytest.raises(InvalidAmountError):
            to_amount(value)
