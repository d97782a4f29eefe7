# ==================== COMPLAINTS/MODELS.PY ====================
from django.db import models
from users.models import CustomUser


class Complaint(models.Model):
    """A support ticket raised by a user, optionally tied to a booking or spot"""
    CATEGORY_CHOICES = (
        ('payment', 'Payment'),
        ('parking', 'Parking'),
        ('behavior', 'Behavior'),
        ('refund', 'Refund'),
        ('other', 'Other'),
    )

    STATUS_CHOICES = (
        ('open', 'Open'),
        ('in_review', 'In Review'),
        ('resolved', 'Resolved'),
        ('rejected', 'Rejected'),
    )

    user = models.ForeignKey(CustomUser, on_delete=models.CASCADE, related_name='complaints')
    against_user = models.ForeignKey(
        CustomUser, on_delete=models.SET_NULL, null=True, blank=True, related_name='complaints_against'
    )
    booking = models.ForeignKey(
        'bookings.Booking', on_delete=models.SET_NULL, null=True, blank=True, related_name='complaints'
    )
    parking_spot = models.ForeignKey(
        'parking.ParkingSpot', on_delete=models.SET_NULL, null=True, blank=True, related_name='complaints'
    )

    category = models.CharField(max_length=20, choices=CATEGORY_CHOICES, default='other')
    subject = models.CharField(max_length=150)
    description = models.TextField(max_length=2000)

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='open')
    resolution = models.TextField(max_length=2000, blank=True)
    resolved_by = models.ForeignKey(
        CustomUser, on_delete=models.SET_NULL, null=True, blank=True, related_name='resolved_complaints'
    )
    resolved_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', 'created_at'], name='complaint_user_created_idx'),
            models.Index(fields=['status', 'created_at'], name='complaint_status_created_idx'),
        ]

    def __str__(self):
        return f"{self.subject} ({self.get_status_display()})"
