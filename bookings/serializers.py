# ==================== BOOKINGS/SERIALIZERS.PY ====================
from rest_framework import serializers
from users.serializers import CarSerializer
from .models import Booking


class BookingSpotSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    title = serializers.CharField()
    address = serializers.CharField()
    city = serializers.CharField()
    price_per_hour = serializers.DecimalField(max_digits=10, decimal_places=2)


class BookingSerializer(serializers.ModelSerializer):
    parking_spot = BookingSpotSerializer(read_only=True, allow_null=True)
    car = CarSerializer(read_only=True, allow_null=True)
    user_name = serializers.CharField(source='user.username', read_only=True)

    class Meta:
        model = Booking
        fields = ['id', 'booking_code', 'user', 'user_name', 'parking_spot', 'car', 'start_time', 'end_time',
                  'hours', 'total_amount', 'status', 'payment_status', 'order_id', 'payment_id',
                  'invoice_number', 'special_requests', 'owner_decision', 'owner_decision_reason',
                  'owner_decision_at', 'cancellation_reason', 'cancelled_at', 'failure_reason',
                  'created_at', 'updated_at']
        read_only_fields = fields


class BookingCreateSerializer(serializers.Serializer):
    """Checkout request; any amount the client sends is ignored"""
    parkingSpotId = serializers.IntegerField()
    carId = serializers.IntegerField(required=False, allow_null=True)
    startTime = serializers.DateTimeField()
    endTime = serializers.DateTimeField()
    specialRequests = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')


class VerifyPaymentSerializer(serializers.Serializer):
    razorpay_payment_id = serializers.CharField(max_length=100)
    razorpay_order_id = serializers.CharField(max_length=100)
    razorpay_signature = serializers.CharField(max_length=256)
    bookingId = serializers.IntegerField()


class CancelBookingSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=300, required=False, allow_blank=True, default='')


class OwnerDecisionSerializer(serializers.Serializer):
    decision = serializers.ChoiceField(choices=['accepted', 'approved', 'rejected'])
    reason = serializers.CharField(max_length=300, required=False, allow_blank=True, default='')

    def validate_decision(self, value):
        return 'accepted' if value == 'approved' else value


class PaymentHistorySerializer(serializers.ModelSerializer):
    bookingId = serializers.IntegerField(source='id')
    bookingCode = serializers.CharField(source='booking_code')
    invoiceNumber = serializers.CharField(source='invoice_number')
    amount = serializers.DecimalField(source='total_amount', max_digits=10, decimal_places=2)
    paymentStatus = serializers.CharField(source='payment_status')
    paymentId = serializers.CharField(source='payment_id')
    orderId = serializers.CharField(source='order_id')
    createdAt = serializers.DateTimeField(source='created_at')
    parkingSpot = BookingSpotSerializer(source='parking_spot', allow_null=True)

    class Meta:
        model = Booking
        fields = ['bookingId', 'bookingCode', 'invoiceNumber', 'amount', 'paymentStatus', 'paymentId',
                  'orderId', 'createdAt', 'parkingSpot']


class InvoiceSerializer(serializers.ModelSerializer):
    invoiceNumber = serializers.SerializerMethodField()
    bookingCode = serializers.CharField(source='booking_code')
    customer = serializers.SerializerMethodField()
    parkingSpot = BookingSpotSerializer(source='parking_spot', allow_null=True)
    startTime = serializers.DateTimeField(source='start_time')
    endTime = serializers.DateTimeField(source='end_time')
    amount = serializers.DecimalField(source='total_amount', max_digits=10, decimal_places=2)
    paymentStatus = serializers.CharField(source='payment_status')
    paymentId = serializers.CharField(source='payment_id')
    issuedAt = serializers.DateTimeField(source='updated_at')

    class Meta:
        model = Booking
        fields = ['invoiceNumber', 'bookingCode', 'customer', 'parkingSpot', 'startTime', 'endTime',
                  'hours', 'amount', 'paymentStatus', 'paymentId', 'issuedAt']

    def get_invoiceNumber(self, obj):
        return obj.invoice_number or f'INV-{obj.booking_code}'

    def get_customer(self, obj):
        return {'id': obj.user_id, 'name': obj.user.get_full_name() or obj.user.username, 'email': obj.user.email}
