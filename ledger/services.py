# ==================== LEDGER/SERVICES.PY ====================
import logging

from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import ValidationError, NotFound

from notifications import dispatch
from users.models import CustomUser
from utils.exceptions import InsufficientBalance
from utils.money import round2, as_float
from .models import Transaction, WithdrawalRequest

logger = logging.getLogger(__name__)


class LedgerService:
    """The only code path that moves a user's wallet_balance.

    Every call locks the user row, changes the balance and writes the matching
    Transaction inside one database transaction, so an entry always satisfies
    ``balance_after - balance_before == amount``.
    """

    @staticmethod
    def _lock_user(user_id):
        try:
            return CustomUser.objects.select_for_update().get(pk=user_id)
        except CustomUser.DoesNotExist:
            raise NotFound('User not found')

    @staticmethod
    def _write(user, amount, new_balance, entry_type, **fields):
        balance_before = user.wallet_balance
        if new_balance != balance_before:
            CustomUser.objects.filter(pk=user.pk).update(wallet_balance=new_balance)
            user.wallet_balance = new_balance

        return Transaction.objects.create(
            user=user,
            type=entry_type,
            amount=amount,
            balance_before=balance_before,
            balance_after=new_balance,
            booking=fields.get('booking'),
            description=fields.get('description') or '',
            status=fields.get('status') or 'completed',
            payment_method=fields.get('payment_method') or 'wallet',
            razorpay_payment_id=fields.get('razorpay_payment_id') or '',
            metadata=fields.get('metadata') or {},
        )

    @staticmethod
    def credit(user_id, amount, entry_type='credit', **fields):
        """Add a positive amount to the wallet; returns the ledger entry"""
        amount = round2(amount)
        if amount <= 0:
            raise ValidationError('Credit amount must be greater than zero')

        with transaction.atomic():
            user = LedgerService._lock_user(user_id)
            entry = LedgerService._write(user, amount, user.wallet_balance + amount, entry_type, **fields)
            dispatch.broadcast('walletUpdated', {'userId': user.id, 'newBalance': as_float(entry.balance_after)})

        logger.info(f"Wallet credited for user {user_id}: +{amount} ({entry_type}), balance {entry.balance_after}")
        return entry

    @staticmethod
    def debit(user_id, amount, entry_type='debit', **fields):
        """Take a positive amount out of the wallet; the entry carries -amount"""
        amount = round2(amount)
        if amount <= 0:
            raise ValidationError('Debit amount must be greater than zero')

        with transaction.atomic():
            user = LedgerService._lock_user(user_id)
            if user.wallet_balance < amount:
                logger.warning(
                    f"Debit of {amount} refused for user {user_id}: balance {user.wallet_balance}"
                )
                raise InsufficientBalance()
            entry = LedgerService._write(user, -amount, user.wallet_balance - amount, entry_type, **fields)
            dispatch.broadcast('walletUpdated', {'userId': user.id, 'newBalance': as_float(entry.balance_after)})

        logger.info(f"Wallet debited for user {user_id}: -{amount} ({entry_type}), balance {entry.balance_after}")
        return entry

    @staticmethod
    def record_entry(user_id, amount, entry_type, **fields):
        """Memo entry at the current balance; the wallet is not touched"""
        amount = round2(amount)
        with transaction.atomic():
            user = LedgerService._lock_user(user_id)
            entry = LedgerService._write(user, amount, user.wallet_balance, entry_type, **fields)

        logger.info(f"Ledger memo {entry_type} {amount} recorded for user {user_id}")
        return entry


class WithdrawalService:
    """Owner payouts out of the wallet"""

    @staticmethod
    def request_withdrawal(owner, amount, bank_details):
        amount = round2(amount)
        if amount <= 0:
            raise ValidationError('Valid withdrawal amount is required')

        with transaction.atomic():
            request = WithdrawalRequest.objects.create(
                owner=owner,
                amount=amount,
                account_holder_name=bank_details.get('account_holder_name', ''),
                account_number=bank_details.get('account_number', ''),
                ifsc=bank_details.get('ifsc', ''),
                bank_name=bank_details.get('bank_name', ''),
            )
            entry = LedgerService.debit(
                owner.id,
                amount,
                entry_type='withdrawal_request',
                status='pending',
                description=f'Withdrawal request {request.id}',
                metadata={'withdrawalRequestId': request.id},
            )
            request.transaction = entry
            request.save(update_fields=['transaction'])

            dispatch.notify_admins(
                'New withdrawal request',
                f'{owner.username} requested a withdrawal of {amount}.',
                metadata={'withdrawalRequestId': request.id},
            )

        logger.info(f"Withdrawal request {request.id} created for {owner.username}: {amount}")
        return request

    @staticmethod
    def process_withdrawal(withdrawal_id, admin, status, admin_note=''):
        if status not in ('approved', 'paid', 'rejected'):
            raise ValidationError('Invalid withdrawal status')

        with transaction.atomic():
            try:
                withdrawal = WithdrawalRequest.objects.select_for_update().get(pk=withdrawal_id)
            except WithdrawalRequest.DoesNotExist:
                raise NotFound('Withdrawal request not found')

            if withdrawal.status != 'pending':
                raise ValidationError('Withdrawal request already processed')

            withdrawal.status = status
            withdrawal.admin_note = admin_note or ''
            withdrawal.processed_by = admin
            withdrawal.processed_at = timezone.now()
            withdrawal.save(update_fields=['status', 'admin_note', 'processed_by', 'processed_at', 'updated_at'])

            metadata = {'withdrawalRequestId': withdrawal.id}
            if status == 'rejected':
                LedgerService.credit(
                    withdrawal.owner_id,
                    withdrawal.amount,
                    entry_type='credit',
                    description=f'Withdrawal rejected: {withdrawal.id}',
                    metadata=metadata,
                )
                WithdrawalService._settle_request_entry(withdrawal, 'failed')
            elif status == 'paid':
                LedgerService.record_entry(
                    withdrawal.owner_id,
                    -withdrawal.amount,
                    'withdrawal_paid',
                    payment_method='bank_transfer',
                    description=f'Withdrawal paid: {withdrawal.id}',
                    metadata=metadata,
                )
                WithdrawalService._settle_request_entry(withdrawal, 'completed')

            dispatch.notify(
                withdrawal.owner_id,
                f'Withdrawal {status}',
                f'Your withdrawal request of {withdrawal.amount} was {status}.',
                type='payment',
                metadata=metadata,
            )

        logger.info(f"Withdrawal {withdrawal.id} marked {status} by {admin.username}")
        return withdrawal

    @staticmethod
    def _settle_request_entry(withdrawal, status):
        entry = withdrawal.transaction
        if entry is not None:
            entry.status = status
            entry.save(update_fields=['status'])
