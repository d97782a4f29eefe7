from django.contrib import admin
from .models import Complaint


@admin.register(Complaint)
class ComplaintAdmin(admin.ModelAdmin):
    list_display = ['subject', 'user', 'category', 'status', 'created_at', 'resolved_at']
    list_filter = ['status', 'category', 'created_at']
    search_fields = ['subject', 'description', 'user__username']
    readonly_fields = ['created_at', 'updated_at', 'resolved_at']
