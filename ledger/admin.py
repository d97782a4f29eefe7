# ==================== LEDGER/ADMIN.PY ====================
from django.contrib import admin
from .models import Transaction, WithdrawalRequest


@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    list_display = ['id', 'user', 'type', 'amount', 'status', 'balance_before', 'balance_after', 'created_at']
    list_filter = ['type', 'status', 'payment_method', 'created_at']
    search_fields = ['user__username', 'description', 'razorpay_payment_id']
    readonly_fields = [f.name for f in Transaction._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(WithdrawalRequest)
class WithdrawalRequestAdmin(admin.ModelAdmin):
    list_display = ['id', 'owner', 'amount', 'status', 'processed_by', 'processed_at', 'created_at']
    list_filter = ['status', 'created_at']
    search_fields = ['owner__username', 'account_holder_name']
    readonly_fields = ['owner', 'amount', 'transaction', 'processed_by', 'processed_at', 'created_at', 'updated_at']
