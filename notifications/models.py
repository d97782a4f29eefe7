# ==================== NOTIFICATIONS/MODELS.PY ====================
from django.db import models
from users.models import CustomUser


class Notification(models.Model):
    TYPE_CHOICES = (
        ('booking', 'Booking'),
        ('payment', 'Payment'),
        ('system', 'System'),
        ('review', 'Review'),
        ('admin', 'Admin'),
    )

    user = models.ForeignKey(CustomUser, on_delete=models.CASCADE, related_name='notifications')
    title = models.CharField(max_length=120)
    message = models.CharField(max_length=500)
    type = models.CharField(max_length=20, choices=TYPE_CHOICES, default='system')
    read = models.BooleanField(default=False, db_index=True)
    metadata = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['user', 'read'], name='notification_user_read_idx'),
        ]

    def __str__(self):
        return f"{self.title} -> {self.user.username}"
