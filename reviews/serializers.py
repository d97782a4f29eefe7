from rest_framework import serializers
from .models import Review


class ReviewSerializer(serializers.ModelSerializer):
    customer_name = serializers.CharField(source='customer.username', read_only=True)
    parking_spot_title = serializers.CharField(source='parking_spot.title', read_only=True)

    class Meta:
        model = Review
        fields = ['id', 'booking', 'parking_spot', 'parking_spot_title', 'customer', 'customer_name', 'owner',
                  'rating', 'comment', 'owner_reply', 'owner_replied_at', 'created_at', 'updated_at']
        read_only_fields = fields


class ReviewCreateSerializer(serializers.Serializer):
    bookingId = serializers.IntegerField()
    rating = serializers.IntegerField(min_value=1, max_value=5)
    comment = serializers.CharField(max_length=1000, required=False, allow_blank=True, default='')


class ReviewReplySerializer(serializers.Serializer):
    text = serializers.CharField(max_length=1000)
