# ==================== PARKING/ADMIN.PY ====================
from django.contrib import admin
from .models import ParkingSpot, Favorite

@admin.register(ParkingSpot)
class ParkingSpotAdmin(admin.ModelAdmin):
    list_display = ['title', 'owner', 'city', 'price_per_hour', 'available_slots', 'total_slots',
                    'is_approved', 'is_active', 'is_maintenance_mode', 'created_at']
    list_filter = ['is_approved', 'is_active', 'is_maintenance_mode', 'city', 'created_at']
    search_fields = ['title', 'address', 'owner__username']
    readonly_fields = ['available_slots', 'rating_average', 'rating_count', 'created_at', 'updated_at']
    fieldsets = (
        ('Basic Info', {'fields': ('owner', 'title', 'description', 'address', 'city')}),
        ('Capacity & Pricing', {'fields': ('total_slots', 'available_slots', 'price_per_hour')}),
        ('Rating', {'fields': ('rating_average', 'rating_count')}),
        ('Moderation', {'fields': ('is_approved', 'is_active', 'is_maintenance_mode', 'maintenance_reason')}),
        ('Timestamps', {'fields': ('created_at', 'updated_at'), 'classes': ('collapse',)}),
    )


@admin.register(Favorite)
class FavoriteAdmin(admin.ModelAdmin):
    list_display = ['user', 'parking_spot', 'created_at']
    search_fields = ['user__username', 'parking_spot__title']
