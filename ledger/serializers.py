# ==================== LEDGER/SERIALIZERS.PY ====================
from decimal import Decimal
from rest_framework import serializers
from .models import Transaction, WithdrawalRequest


class TransactionSerializer(serializers.ModelSerializer):
    booking_code = serializers.CharField(source='booking.booking_code', read_only=True, default=None)

    class Meta:
        model = Transaction
        fields = ['id', 'type', 'amount', 'description', 'status', 'balance_before', 'balance_after',
                  'payment_method', 'razorpay_payment_id', 'booking', 'booking_code', 'metadata', 'created_at']
        read_only_fields = fields


class AdminTransactionSerializer(TransactionSerializer):
    user_name = serializers.CharField(source='user.username', read_only=True)
    user_email = serializers.EmailField(source='user.email', read_only=True)

    class Meta(TransactionSerializer.Meta):
        fields = ['user', 'user_name', 'user_email'] + TransactionSerializer.Meta.fields
        read_only_fields = fields


class BankDetailsSerializer(serializers.Serializer):
    account_holder_name = serializers.CharField(max_length=150)
    account_number = serializers.RegexField(r'^\d{6,34}$', max_length=34)
    ifsc = serializers.RegexField(r'^[A-Za-z]{4}0[A-Za-z0-9]{6}$', max_length=11)
    bank_name = serializers.CharField(max_length=150, required=False, allow_blank=True, default='')

    def validate_ifsc(self, value):
        return value.upper()


class WithdrawalCreateSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0.01'))
    bankDetails = BankDetailsSerializer()


class WithdrawalProcessSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=['approved', 'paid', 'rejected'])
    adminNote = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')


class WithdrawalRequestSerializer(serializers.ModelSerializer):
    owner_name = serializers.CharField(source='owner.username', read_only=True)
    owner_email = serializers.EmailField(source='owner.email', read_only=True)

    class Meta:
        model = WithdrawalRequest
        fields = ['id', 'owner', 'owner_name', 'owner_email', 'amount', 'account_holder_name',
                  'account_number', 'ifsc', 'bank_name', 'status', 'admin_note', 'processed_by',
                  'processed_at', 'created_at', 'updated_at']
        read_only_fields = fields
