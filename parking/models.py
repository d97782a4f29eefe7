# parking/models.py

from decimal import Decimal

from django.db import models
from django.core.validators import MinValueValidator
from users.models import CustomUser


class ParkingSpot(models.Model):
    owner = models.ForeignKey(CustomUser, on_delete=models.CASCADE, related_name='parking_spots')

    # Location info
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    address = models.CharField(max_length=500)
    city = models.CharField(max_length=100, db_index=True)

    # Capacity - available_slots is only moved by parking.slots
    total_slots = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    available_slots = models.PositiveIntegerField()

    price_per_hour = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])

    # Moderation / availability
    is_approved = models.BooleanField(default=True)
    is_active = models.BooleanField(default=True)
    is_maintenance_mode = models.BooleanField(default=False)
    maintenance_reason = models.CharField(max_length=300, blank=True)

    # Denormalised from reviews.Review, refreshed whenever a review is added
    rating_average = models.DecimalField(max_digits=3, decimal_places=2, default=Decimal('0.00'))
    rating_count = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['city'], name='parking_spot_city_idx'),
            models.Index(fields=['owner'], name='parking_spot_owner_idx'),
            models.Index(fields=['created_at'], name='parking_spot_created_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(available_slots__lte=models.F('total_slots')),
                name='parking_available_slots_within_capacity',
            ),
        ]

    def __str__(self):
        return f"{self.title} - {self.address}"

    def save(self, *args, **kwargs):
        if self.available_slots is None or self.available_slots > self.total_slots:
            self.available_slots = self.total_slots
        super().save(*args, **kwargs)

    @property
    def is_bookable(self):
        """Approved, active and not under maintenance"""
        return self.is_approved and self.is_active and not self.is_maintenance_mode


class Favorite(models.Model):
    """A spot saved by a user for quick rebooking"""
    user = models.ForeignKey(CustomUser, on_delete=models.CASCADE, related_name='favorites')
    parking_spot = models.ForeignKey(ParkingSpot, on_delete=models.CASCADE, related_name='favorited_by')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(fields=['user', 'parking_spot'], name='parking_favorite_unique_user_spot'),
        ]

    def __str__(self):
        return f"{self.user.username} - {self.parking_spot.title}"
