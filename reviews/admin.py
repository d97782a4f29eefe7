from django.contrib import admin
from .models import Review


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ['parking_spot', 'customer', 'rating', 'created_at', 'owner_replied_at']
    list_filter = ['rating', 'created_at']
    search_fields = ['parking_spot__title', 'customer__username', 'comment']
    readonly_fields = ['created_at', 'updated_at']
