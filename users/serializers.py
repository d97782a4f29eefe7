# ==================== USERS/SERIALIZERS.PY ====================
from rest_framework import serializers
from django.contrib.auth import authenticate
from .models import CustomUser, Car

class UserRegistrationSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True, min_length=8)
    password_confirm = serializers.CharField(write_only=True)
    role = serializers.ChoiceField(
        choices=[CustomUser.ROLE_CUSTOMER, CustomUser.ROLE_PARKING_OWNER],
        default=CustomUser.ROLE_CUSTOMER
    )

    class Meta:
        model = CustomUser
        fields = ['username', 'email', 'first_name', 'last_name', 'phone_number', 'role', 'password', 'password_confirm']

    def validate(self, data):
        if data['password'] != data['password_confirm']:
            raise serializers.ValidationError({"password": "Passwords do not match"})
        return data

    def create(self, validated_data):
        validated_data.pop('password_confirm')
        password = validated_data.pop('password')
        user = CustomUser.objects.create_user(password=password, **validated_data)
        return user


class UserLoginSerializer(serializers.Serializer):
    username = serializers.CharField()
    password = serializers.CharField(write_only=True)

    def validate(self, data):
        user = authenticate(username=data['username'], password=data['password'])
        if not user:
            raise serializers.ValidationError("Invalid credentials")
        data['user'] = user
        return data


class UserProfileSerializer(serializers.ModelSerializer):

    class Meta:
        model = CustomUser
        fields = ['id', 'username', 'email', 'first_name', 'last_name', 'phone_number', 'role',
                  'wallet_balance', 'is_verified']
        read_only_fields = ['role', 'wallet_balance', 'is_verified']


class CarSerializer(serializers.ModelSerializer):
    class Meta:
        model = Car
        fields = ['id', 'name', 'number_plate', 'vehicle_type', 'is_default', 'created_at']
        read_only_fields = ['created_at']

    def validate_number_plate(self, value):
        value = value.strip().upper()
        cars = Car.objects.filter(owner=self.context['request'].user, number_plate=value)
        if self.instance is not None:
            cars = cars.exclude(pk=self.instance.pk)
        if cars.exists():
            raise serializers.ValidationError("You have already registered this number plate")
        return value
