from decimal import Decimal

from django.test import TestCase
from rest_framework.exceptions import ValidationError

from ledger.models import Transaction, WithdrawalRequest
from ledger.services import LedgerService, WithdrawalService
from users.models import CustomUser
from utils.exceptions import InsufficientBalance
from .helpers import make_user

BANK_DETAILS = {
    'account_holder_name': 'Asha Rao',
    'account_number': '001234567890',
    'ifsc': 'HDFC0001234',
    'bank_name': 'HDFC Bank',
}


class LedgerServiceTests(TestCase):
    def setUp(self):
        self.owner = make_user('owner', role=CustomUser.ROLE_PARKING_OWNER)

    def test_credit(self):
        entry = LedgerService.credit(self.owner.id, Decimal('120.50'), entry_type='earning', description='Booking')

        self.owner.refresh_from_db()
        self.assertEqual(self.owner.wallet_balance, Decimal('120.50'))
        self.assertEqual(entry.amount, Decimal('120.50'))
        self.assertEqual(entry.balance_before, Decimal('0.00'))
        self.assertEqual(entry.balance_after, Decimal('120.50'))
        self.assertEqual(entry.type, 'earning')
        self.assertEqual(entry.status, 'completed')

    def test_debit_records_negative_amount(self):
        LedgerService.credit(self.owner.id, Decimal('100'))

        entry = LedgerService.debit(self.owner.id, Decimal('40'), entry_type='penalty')

        self.owner.refresh_from_db()
        self.assertEqual(self.owner.wallet_balance, Decimal('60.00'))
        self.assertEqual(entry.amount, Decimal('-40.00'))
        self.assertEqual(entry.balance_after - entry.balance_before, entry.amount)

    def test_debit_beyond_balance(self):
        LedgerService.credit(self.owner.id, Decimal('10'))

        with self.assertRaises(InsufficientBalance):
            LedgerService.debit(self.owner.id, Decimal('10.01'))

        self.owner.refresh_from_db()
        self.assertEqual(self.owner.wallet_balance, Decimal('10.00'))
        self.assertEqual(Transaction.objects.count(), 1)

    def test_amount_must_be_positive(self):
        with self.assertRaises(ValidationError):
            LedgerService.credit(self.owner.id, Decimal('0'))
        with self.assertRaises(ValidationError):
            LedgerService.debit(self.owner.id, Decimal('-5'))

    def test_memo_entry_keeps_balance(self):
        LedgerService.credit(self.owner.id, Decimal('50'))

        entry = LedgerService.record_entry(self.owner.id, Decimal('-7.50'), 'platform_fee')

        self.owner.refresh_from_db()
        self.assertEqual(self.owner.wallet_balance, Decimal('50.00'))
        self.assertEqual(entry.balance_before, Decimal('50.00'))
        self.assertEqual(entry.balance_after, Decimal('50.00'))
        self.assertEqual(entry.amount, Decimal('-7.50'))

    def test_entries_are_append_only(self):
        entry = LedgerService.credit(self.owner.id, Decimal('5'))

        entry.amount = Decimal('500')
        with self.assertRaises(ValueError):
            entry.save()

        entry.refresh_from_db()
        entry.status = 'failed'
        entry.save(update_fields=['status'])
        entry.refresh_from_db()
        self.assertEqual(entry.status, 'failed')
        self.assertEqual(entry.amount, Decimal('5.00'))

    def test_balances_chain(self):
        LedgerService.credit(self.owner.id, Decimal('100'))
        LedgerService.debit(self.owner.id, Decimal('30'))
        LedgerService.credit(self.owner.id, Decimal('5'))

        entries = list(Transaction.objects.filter(user=self.owner).order_by('id'))
        for previous, current in zip(entries, entries[1:]):
            self.assertEqual(previous.balance_after, current.balance_before)
        self.owner.refresh_from_db()
        self.assertEqual(entries[-1].balance_after, self.owner.wallet_balance)


class WithdrawalServiceTests(TestCase):
    def setUp(self):
        self.owner = make_user('owner', role=CustomUser.ROLE_PARKING_OWNER)
        self.admin = make_user('admin', role=CustomUser.ROLE_ADMIN)
        LedgerService.credit(self.owner.id, Decimal('500'), entry_type='earning')

    def test_request_debits_immediately(self):
        withdrawal = WithdrawalService.request_withdrawal(self.owner, Decimal('200'), BANK_DETAILS)

        self.owner.refresh_from_db()
        self.assertEqual(self.owner.wallet_balance, Decimal('300.00'))
        self.assertEqual(withdrawal.status, 'pending')
        self.assertEqual(withdrawal.transaction.type, 'withdrawal_request')
        self.assertEqual(withdrawal.transaction.status, 'pending')
        self.assertEqual(withdrawal.transaction.amount, Decimal('-200.00'))

    def test_request_beyond_balance(self):
        with self.assertRaises(InsufficientBalance):
            WithdrawalService.request_withdrawal(self.owner, Decimal('500.01'), BANK_DETAILS)

        self.assertFalse(WithdrawalRequest.objects.exists())

    def test_request_requires_positive_amount(self):
        with self.assertRaises(ValidationError):
            WithdrawalService.request_withdrawal(self.owner, Decimal('0'), BANK_DETAILS)

    def test_rejection_credits_back(self):
        withdrawal = WithdrawalService.request_withdrawal(self.owner, Decimal('200'), BANK_DETAILS)

        withdrawal = WithdrawalService.process_withdrawal(withdrawal.id, self.admin, 'rejected', 'Bank details mismatch')

        self.owner.refresh_from_db()
        self.assertEqual(self.owner.wallet_balance, Decimal('500.00'))
        self.assertEqual(withdrawal.status, 'rejected')
        self.assertEqual(withdrawal.admin_note, 'Bank details mismatch')
        self.assertEqual(withdrawal.processed_by, self.admin)
        self.assertIsNotNone(withdrawal.processed_at)
        withdrawal.transaction.refresh_from_db()
        self.assertEqual(withdrawal.transaction.status, 'failed')
        self.assertTrue(Transaction.objects.filter(type='credit', amount=Decimal('200.00')).exists())

    def test_paid_writes_memo(self):
        withdrawal = WithdrawalService.request_withdrawal(self.owner, Decimal('200'), BANK_DETAILS)

        WithdrawalService.process_withdrawal(withdrawal.id, self.admin, 'paid')

        self.owner.refresh_from_db()
        self.assertEqual(self.owner.wallet_balance, Decimal('300.00'))
        memo = Transaction.objects.get(type='withdrawal_paid')
        self.assertEqual(memo.amount, Decimal('-200.00'))
        self.assertEqual(memo.balance_before, memo.balance_after)
        self.assertEqual(memo.payment_method, 'bank_transfer')
        withdrawal.transaction.refresh_from_db()
        self.assertEqual(withdrawal.transaction.status, 'completed')

    def test_processed_request_is_final(self):
        withdrawal = WithdrawalService.request_withdrawal(self.owner, Decimal('200'), BANK_DETAILS)
        WithdrawalService.process_withdrawal(withdrawal.id, self.admin, 'approved')

        with self.assertRaises(ValidationError):
            WithdrawalService.process_withdrawal(withdrawal.id, self.admin, 'rejected')

        self.owner.refresh_from_db()
        self.assertEqual(self.owner.wallet_balance, Decimal('300.00'))

    def test_invalid_status(self):
        withdrawal = WithdrawalService.request_withdrawal(self.owner, Decimal('200'), BANK_DETAILS)

        with self.assertRaises(ValidationError):
            WithdrawalService.process_withdrawal(withdrawal.id, self.admin, 'pending')
