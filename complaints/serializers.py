from rest_framework import serializers
from .models import Complaint


class ComplaintSerializer(serializers.ModelSerializer):
    user_name = serializers.CharField(source='user.username', read_only=True)

    class Meta:
        model = Complaint
        fields = ['id', 'user', 'user_name', 'against_user', 'booking', 'parking_spot', 'category',
                  'subject', 'description', 'status', 'resolution', 'resolved_by', 'resolved_at',
                  'created_at', 'updated_at']
        read_only_fields = ['user', 'status', 'resolution', 'resolved_by', 'resolved_at',
                            'created_at', 'updated_at']

    def validate_booking(self, value):
        request = self.context['request']
        if value is None:
            return value
        if request.user.id not in (value.user_id, getattr(value.parking_spot, 'owner_id', None)):
            raise serializers.ValidationError('Booking does not belong to you')
        return value


class ComplaintUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Complaint.STATUS_CHOICES)
    resolution = serializers.CharField(max_length=2000, required=False, allow_blank=True)
