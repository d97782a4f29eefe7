from decimal import Decimal
from rest_framework import serializers
from .models import PlatformSetting


class CommissionSettingSerializer(serializers.ModelSerializer):
    commission_percent = serializers.DecimalField(
        max_digits=5, decimal_places=2, min_value=Decimal('0'), max_value=Decimal('100')
    )
    updated_by = serializers.CharField(source='updated_by.username', read_only=True, default=None)

    class Meta:
        model = PlatformSetting
        fields = ['commission_percent', 'updated_by', 'updated_at']
        read_only_fields = ['updated_by', 'updated_at']
