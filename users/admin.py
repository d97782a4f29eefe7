# ==================== USERS/ADMIN.PY ====================
from django.contrib import admin
from .models import CustomUser, Car

@admin.register(CustomUser)
class CustomUserAdmin(admin.ModelAdmin):
    list_display = ['username', 'email', 'phone_number', 'role', 'wallet_balance', 'is_verified', 'created_at']
    list_filter = ['role', 'is_verified', 'created_at']
    search_fields = ['username', 'email', 'phone_number']
    # Wallet changes must go through the ledger
    readonly_fields = ['wallet_balance', 'created_at', 'updated_at']


@admin.register(Car)
class CarAdmin(admin.ModelAdmin):
    list_display = ['number_plate', 'name', 'owner', 'vehicle_type', 'is_default', 'created_at']
    list_filter = ['vehicle_type', 'is_default']
    search_fields = ['number_plate', 'owner__username']
    readonly_fields = ['created_at', 'updated_at']
