import secrets
import string

from django.db import models
from django.utils import timezone
from users.models import CustomUser, Car
from parking.models import ParkingSpot

CODE_ALPHABET = string.ascii_uppercase + string.digits


def generate_booking_code():
    """SPOT + epoch milliseconds + 5 random uppercase alphanumerics"""
    millis = int(timezone.now().timestamp() * 1000)
    suffix = ''.join(secrets.choice(CODE_ALPHABET) for _ in range(5))
    return f"SPOT{millis}{suffix}"


class Booking(models.Model):
    STATUS_CHOICES = (
        ('pending', 'Pending Payment'),
        ('confirmed', 'Confirmed'),
        ('cancelled', 'Cancelled'),
        ('completed', 'Completed'),
        ('failed', 'Failed'),
    )
    PAYMENT_STATUS_CHOICES = (
        ('pending', 'Pending'),
        ('paid', 'Paid'),
        ('failed', 'Failed'),
        ('refunded', 'Refunded'),
    )
    OWNER_DECISION_CHOICES = (
        ('pending', 'Pending'),
        ('accepted', 'Accepted'),
        ('rejected', 'Rejected'),
    )
    TERMINAL_STATUSES = ('cancelled', 'completed', 'failed')
    # Bookings that hold a slot
    ACTIVE_STATUSES = ('pending', 'confirmed')

    # Relations
    user = models.ForeignKey(CustomUser, on_delete=models.CASCADE, related_name='bookings')
    # Survives spot deletion for audit
    parking_spot = models.ForeignKey(
        ParkingSpot, on_delete=models.SET_NULL, null=True, blank=True, related_name='bookings'
    )
    car = models.ForeignKey(Car, on_delete=models.SET_NULL, null=True, blank=True, related_name='bookings')

    # Booking window
    start_time = models.DateTimeField(db_index=True)
    end_time = models.DateTimeField()
    hours = models.PositiveIntegerField()

    # Pricing - always computed server side
    total_amount = models.DecimalField(max_digits=10, decimal_places=2)

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending', db_index=True)
    payment_status = models.CharField(max_length=20, choices=PAYMENT_STATUS_CHOICES, default='pending')

    # Gateway
    order_id = models.CharField(max_length=100, blank=True, db_index=True)
    payment_id = models.CharField(max_length=100, blank=True)
    razorpay_signature = models.CharField(max_length=256, blank=True)

    booking_code = models.CharField(max_length=40, unique=True, editable=False)
    invoice_number = models.CharField(max_length=60, blank=True)
    special_requests = models.CharField(max_length=500, blank=True)

    owner_decision = models.CharField(max_length=20, choices=OWNER_DECISION_CHOICES, default='pending')
    owner_decision_reason = models.CharField(max_length=300, blank=True)
    owner_decision_at = models.DateTimeField(null=True, blank=True)

    cancellation_reason = models.CharField(max_length=300, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)
    failure_reason = models.CharField(max_length=300, blank=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', 'status'], name='booking_user_status_idx'),
            models.Index(fields=['parking_spot', 'status'], name='booking_spot_status_idx'),
            models.Index(fields=['status', 'created_at'], name='booking_status_created_idx'),
        ]

    def __str__(self):
        return f"Booking {self.booking_code} - {self.user.username}"

    def save(self, *args, **kwargs):
        if not self.booking_code:
            self.booking_code = generate_booking_code()
        super().save(*args, **kwargs)

    @property
    def is_terminal(self):
        return self.status in self.TERMINAL_STATUSES

    def assign_invoice_number(self):
        millis = int(timezone.now().timestamp() * 1000)
        self.invoice_number = f"INV-{millis}-{self.booking_code[-5:]}"
        return self.invoice_number
