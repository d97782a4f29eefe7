# ==================== BOOKINGS/ADMIN.PY ====================
from django.contrib import admin
from .models import Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ['booking_code', 'user', 'parking_spot', 'status', 'payment_status',
                    'total_amount', 'start_time', 'end_time', 'created_at']
    list_filter = ['status', 'payment_status', 'owner_decision', 'created_at']
    search_fields = ['booking_code', 'invoice_number', 'order_id', 'payment_id', 'user__username']
    readonly_fields = ['booking_code', 'invoice_number', 'hours', 'total_amount', 'order_id', 'payment_id',
                       'razorpay_signature', 'created_at', 'updated_at']
    fieldsets = (
        ('Booking', {'fields': ('booking_code', 'user', 'parking_spot', 'car', 'special_requests')}),
        ('Timing', {'fields': ('start_time', 'end_time', 'hours')}),
        ('Payment', {'fields': ('total_amount', 'status', 'payment_status', 'order_id', 'payment_id',
                                'razorpay_signature', 'invoice_number')}),
        ('Owner Decision', {'fields': ('owner_decision', 'owner_decision_reason', 'owner_decision_at')}),
        ('Closure', {'fields': ('cancellation_reason', 'cancelled_at', 'failure_reason')}),
        ('Timestamps', {'fields': ('created_at', 'updated_at'), 'classes': ('collapse',)}),
    )
