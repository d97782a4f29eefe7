# ==================== PAYMENTS/MODELS.PY ====================
from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models


def default_commission_percent():
    return Decimal(str(settings.DEFAULT_COMMISSION_PERCENT))


class PlatformSetting(models.Model):
    """Platform wide settings, stored as a single row keyed 'default'"""
    DEFAULT_KEY = 'default'

    key = models.CharField(max_length=50, unique=True, default=DEFAULT_KEY)
    commission_percent = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=default_commission_percent,
        validators=[MinValueValidator(0), MaxValueValidator(100)],
        help_text="Commission percentage (0-100%)"
    )
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='+'
    )
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'Platform Setting'
        constraints = [
            models.CheckConstraint(
                condition=models.Q(commission_percent__gte=0) & models.Q(commission_percent__lte=100),
                name='payments_commission_percent_range',
            ),
        ]

    def __str__(self):
        return f"{self.key}: {self.commission_percent}% commission"

    @classmethod
    def load(cls):
        setting, _ = cls.objects.get_or_create(key=cls.DEFAULT_KEY)
        return setting
