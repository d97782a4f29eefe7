# ==================== REVIEWS/MODELS.PY ====================
from django.db import models
from django.core.validators import MinValueValidator, MaxValueValidator
from users.models import CustomUser


class Review(models.Model):
    """A customer's rating of a spot after a paid stay, with an optional owner reply"""
    booking = models.OneToOneField('bookings.Booking', on_delete=models.CASCADE, related_name='review')
    parking_spot = models.ForeignKey('parking.ParkingSpot', on_delete=models.CASCADE, related_name='reviews')
    customer = models.ForeignKey(CustomUser, on_delete=models.CASCADE, related_name='given_reviews')
    owner = models.ForeignKey(CustomUser, on_delete=models.CASCADE, related_name='received_reviews')

    rating = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(5)])
    comment = models.TextField(max_length=1000, blank=True)

    owner_reply = models.TextField(max_length=1000, blank=True)
    owner_replied_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['parking_spot', 'created_at'], name='review_spot_created_idx'),
            models.Index(fields=['owner', 'created_at'], name='review_owner_created_idx'),
            models.Index(fields=['customer', 'created_at'], name='review_customer_created_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(rating__gte=1) & models.Q(rating__lte=5),
                name='review_rating_range',
            ),
        ]

    def __str__(self):
        return f"Review by {self.customer.username} for {self.parking_spot.title} ({self.rating})"
