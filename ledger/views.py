# ==================== LEDGER/VIEWS.PY ====================
from rest_framework import viewsets, permissions, mixins, status
from rest_framework.response import Response
from rest_framework.views import APIView
from django_filters.rest_framework import DjangoFilterBackend

from utils.pagination import PaginatedResponseMixin
from utils.permissions import IsParkingOwner, IsPlatformAdmin
from .models import Transaction, WithdrawalRequest
from .serializers import (
    TransactionSerializer, AdminTransactionSerializer, WithdrawalRequestSerializer,
    WithdrawalCreateSerializer, WithdrawalProcessSerializer
)
from .services import WithdrawalService


class OwnerWalletView(APIView):
    """Current wallet balance with the latest ledger entries"""
    permission_classes = [permissions.IsAuthenticated, IsParkingOwner]

    def get(self, request):
        request.user.refresh_from_db(fields=['wallet_balance'])
        recent = Transaction.objects.filter(user=request.user).select_related('booking')[:10]
        pending = WithdrawalRequest.objects.filter(owner=request.user, status__in=['pending', 'approved'])
        return Response({
            'success': True,
            'data': {
                'walletBalance': request.user.wallet_balance,
                'pendingWithdrawals': pending.count(),
                'recentTransactions': TransactionSerializer(recent, many=True).data,
            }
        })


class OwnerTransactionViewSet(PaginatedResponseMixin, viewsets.ReadOnlyModelViewSet):
    serializer_class = TransactionSerializer
    lookup_value_regex = r'\d+'
    permission_classes = [permissions.IsAuthenticated, IsParkingOwner]
    filter_backends = [DjangoFilterBackend]
    filterset_fields = ['type', 'status']

    def get_queryset(self):
        return Transaction.objects.filter(user=self.request.user).select_related('booking')


class OwnerWithdrawalViewSet(PaginatedResponseMixin,
                             mixins.ListModelMixin,
                             mixins.CreateModelMixin,
                             viewsets.GenericViewSet):
    serializer_class = WithdrawalRequestSerializer
    lookup_value_regex = r'\d+'
    permission_classes = [permissions.IsAuthenticated, IsParkingOwner]

    def get_queryset(self):
        return WithdrawalRequest.objects.filter(owner=self.request.user)

    def create(self, request, *args, **kwargs):
        serializer = WithdrawalCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        withdrawal = WithdrawalService.request_withdrawal(
            request.user,
            serializer.validated_data['amount'],
            serializer.validated_data['bankDetails'],
        )
        return Response(
            {'success': True, 'data': WithdrawalRequestSerializer(withdrawal).data},
            status=status.HTTP_201_CREATED
        )


class AdminWithdrawalViewSet(PaginatedResponseMixin,
                             mixins.ListModelMixin,
                             mixins.RetrieveModelMixin,
                             mixins.UpdateModelMixin,
                             viewsets.GenericViewSet):
    serializer_class = WithdrawalRequestSerializer
    lookup_value_regex = r'\d+'
    permission_classes = [permissions.IsAuthenticated, IsPlatformAdmin]
    filter_backends = [DjangoFilterBackend]
    filterset_fields = ['status', 'owner']
    queryset = WithdrawalRequest.objects.select_related('owner')
    http_method_names = ['get', 'put', 'head', 'options']

    def update(self, request, *args, **kwargs):
        serializer = WithdrawalProcessSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        withdrawal = WithdrawalService.process_withdrawal(
            kwargs['pk'],
            request.user,
            serializer.validated_data['status'],
            serializer.validated_data['adminNote'],
        )
        return Response({'success': True, 'data': WithdrawalRequestSerializer(withdrawal).data})


class AdminTransactionViewSet(PaginatedResponseMixin, viewsets.ReadOnlyModelViewSet):
    """Every ledger entry on the platform, newest first"""
    serializer_class = AdminTransactionSerializer
    lookup_value_regex = r'\d+'
    permission_classes = [permissions.IsAuthenticated, IsPlatformAdmin]
    filter_backends = [DjangoFilterBackend]
    filterset_fields = ['type', 'status', 'user', 'booking']
    queryset = Transaction.objects.select_related('user', 'booking')
