from decimal import Decimal

from django.db import models
from django.contrib.auth.models import AbstractUser
from django.core.validators import MinValueValidator
from phonenumber_field.modelfields import PhoneNumberField


class CustomUser(AbstractUser):
    ROLE_CUSTOMER = 'customer'
    ROLE_PARKING_OWNER = 'parking_owner'
    ROLE_ADMIN = 'admin'
    ROLE_CHOICES = (
        (ROLE_CUSTOMER, 'Customer'),
        (ROLE_PARKING_OWNER, 'Parking Owner'),
        (ROLE_ADMIN, 'Admin'),
    )

    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=ROLE_CUSTOMER, db_index=True)
    phone_number = PhoneNumberField(blank=True)

    # Wallet - only ever mutated through ledger.services.LedgerService
    wallet_balance = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))],
    )

    is_verified = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        constraints = [
            models.CheckConstraint(
                condition=models.Q(wallet_balance__gte=0),
                name='users_wallet_balance_non_negative',
            ),
        ]

    def __str__(self):
        return f"{self.username} ({self.get_role_display()})"

    @property
    def is_parking_owner(self):
        return self.role == self.ROLE_PARKING_OWNER

    @property
    def is_platform_admin(self):
        return self.role == self.ROLE_ADMIN or self.is_superuser


class Car(models.Model):
    """Cars a customer can attach to a booking"""
    owner = models.ForeignKey(CustomUser, on_delete=models.CASCADE, related_name='cars')
    name = models.CharField(max_length=100)
    number_plate = models.CharField(max_length=20, db_index=True)
    vehicle_type = models.CharField(max_length=30, default='car')  # car, bike, suv, ev
    is_default = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=['owner', 'number_plate'], name='users_car_unique_plate_per_owner'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.owner.username} - {self.number_plate}"
