# ==================== LEDGER/MODELS.PY ====================
from django.db import models
from django.core.validators import MinValueValidator
from decimal import Decimal
from users.models import CustomUser


class Transaction(models.Model):
    """Append-only wallet ledger entry"""

    TYPE_CHOICES = (
        ('credit', 'Credit'),
        ('debit', 'Debit'),
        ('refund', 'Refund'),
        ('earning', 'Earning'),
        ('platform_fee', 'Platform Fee'),
        ('withdrawal_request', 'Withdrawal Request'),
        ('withdrawal_paid', 'Withdrawal Paid'),
        ('penalty', 'Penalty'),
    )
    STATUS_CHOICES = (
        ('pending', 'Pending'),
        ('completed', 'Completed'),
        ('failed', 'Failed'),
    )
    PAYMENT_METHOD_CHOICES = (
        ('razorpay', 'Razorpay'),
        ('wallet', 'Wallet'),
        ('refund', 'Refund'),
        ('bank_transfer', 'Bank Transfer'),
        ('manual', 'Manual'),
    )

    user = models.ForeignKey(CustomUser, on_delete=models.CASCADE, related_name='transactions')
    booking = models.ForeignKey(
        'bookings.Booking', on_delete=models.SET_NULL, null=True, blank=True, related_name='transactions'
    )

    type = models.CharField(max_length=30, choices=TYPE_CHOICES, db_index=True)
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    description = models.CharField(max_length=255, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='completed')

    balance_before = models.DecimalField(max_digits=12, decimal_places=2)
    balance_after = models.DecimalField(max_digits=12, decimal_places=2)

    payment_method = models.CharField(max_length=20, choices=PAYMENT_METHOD_CHOICES, default='wallet')
    razorpay_payment_id = models.CharField(max_length=100, blank=True)
    metadata = models.JSONField(default=dict, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['user', 'created_at'], name='ledger_txn_user_created_idx'),
            models.Index(fields=['booking', 'type'], name='ledger_txn_booking_type_idx'),
        ]

    def __str__(self):
        return f"{self.type} {self.amount} for {self.user.username}"

    def save(self, *args, **kwargs):
        # Entries are never rewritten; only the status of an existing row may move
        if self.pk is not None:
            update_fields = kwargs.get('update_fields')
            if update_fields is None or not set(update_fields) <= {'status'}:
                raise ValueError("Ledger entries are append-only; only status can be updated")
        super().save(*args, **kwargs)


class WithdrawalRequest(models.Model):
    STATUS_CHOICES = (
        ('pending', 'Pending'),
        ('approved', 'Approved'),
        ('paid', 'Paid'),
        ('rejected', 'Rejected'),
    )

    owner = models.ForeignKey(CustomUser, on_delete=models.CASCADE, related_name='withdrawal_requests')
    amount = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(Decimal('0.01'))])

    # Bank details
    account_holder_name = models.CharField(max_length=150)
    account_number = models.CharField(max_length=34)
    ifsc = models.CharField(max_length=11)
    bank_name = models.CharField(max_length=150, blank=True)

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending', db_index=True)
    admin_note = models.CharField(max_length=500, blank=True)
    transaction = models.OneToOneField(
        Transaction, on_delete=models.SET_NULL, null=True, blank=True, related_name='withdrawal'
    )
    processed_by = models.ForeignKey(
        CustomUser, on_delete=models.SET_NULL, null=True, blank=True, related_name='processed_withdrawals'
    )
    processed_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return f"Withdrawal {self.id} - {self.owner.username} ({self.amount}, {self.status})"
