# ==================== PARKING/SERIALIZERS.PY ====================
from rest_framework import serializers
from .models import ParkingSpot, Favorite


class ParkingSpotSerializer(serializers.ModelSerializer):
    owner_name = serializers.CharField(source='owner.get_full_name', read_only=True)

    class Meta:
        model = ParkingSpot
        fields = ['id', 'owner', 'owner_name', 'title', 'description', 'address', 'city',
                  'total_slots', 'available_slots', 'price_per_hour', 'is_approved', 'is_active',
                  'is_maintenance_mode', 'maintenance_reason', 'rating_average', 'rating_count',
                  'created_at', 'updated_at']
        # Slot counts and moderation flags are server managed
        read_only_fields = ['owner', 'available_slots', 'is_approved', 'is_maintenance_mode',
                            'maintenance_reason', 'rating_average', 'rating_count', 'created_at', 'updated_at']

    def validate_total_slots(self, value):
        if self.instance is not None and value != self.instance.total_slots:
            raise serializers.ValidationError("Capacity cannot be changed once the spot is listed")
        return value

    def create(self, validated_data):
        validated_data['owner'] = self.context['request'].user
        validated_data['available_slots'] = validated_data['total_slots']
        return super().create(validated_data)


class MaintenanceModeSerializer(serializers.Serializer):
    enabled = serializers.BooleanField()
    reason = serializers.CharField(max_length=300, required=False, allow_blank=True, default='')


class FavoriteSerializer(serializers.ModelSerializer):
    parking_spot = ParkingSpotSerializer(read_only=True)

    class Meta:
        model = Favorite
        fields = ['id', 'parking_spot', 'created_at']
        read_only_fields = fields
