# ============================= BOOKINGS VIEWS =============================
from rest_framework import viewsets, mixins, status, permissions, filters
from rest_framework.decorators import action
from rest_framework.response import Response
from django_filters.rest_framework import DjangoFilterBackend

from payments.services import PaymentVerificationService
from utils.pagination import PaginatedResponseMixin
from utils.permissions import IsParkingOwner, IsPlatformAdmin, IsBookingUserOrAdmin
from .dtos import BookingRequest, PaymentConfirmation
from .models import Booking
from .serializers import (
    BookingSerializer,
    BookingCreateSerializer,
    VerifyPaymentSerializer,
    CancelBookingSerializer,
    OwnerDecisionSerializer,
    PaymentHistorySerializer,
    InvoiceSerializer
)
from .services import BookingService


class BookingViewSet(PaginatedResponseMixin,
                     mixins.ListModelMixin,
                     mixins.RetrieveModelMixin,
                     viewsets.GenericViewSet):
    """Booking checkout, payment verification, cancellation and history"""

    serializer_class = BookingSerializer
    lookup_value_regex = r'\d+'
    permission_classes = [permissions.IsAuthenticated]
    filter_backends = [
        DjangoFilterBackend,
        filters.OrderingFilter
    ]
    filterset_fields = ['status', 'parking_spot', 'payment_status']
    ordering_fields = ['created_at', 'start_time', 'total_amount']
    ordering = ['-created_at']

    def get_queryset(self):
        return Booking.objects.select_related('user', 'parking_spot', 'car')

    def get_permissions(self):
        if self.action == 'list':
            permission_classes = [permissions.IsAuthenticated, IsPlatformAdmin]
        elif self.action in ['retrieve', 'invoice']:
            permission_classes = [permissions.IsAuthenticated, IsBookingUserOrAdmin]
        else:
            permission_classes = [permissions.IsAuthenticated]
        return [permission() for permission in permission_classes]

    def create(self, request, *args, **kwargs):
        """Reserve a slot and open a payment order"""
        serializer = BookingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        booking, order = BookingService.create_booking(BookingRequest(
            parking_spot_id=data['parkingSpotId'],
            requester_id=request.user.id,
            start_time=data['startTime'],
            end_time=data['endTime'],
            car_id=data.get('carId'),
            special_requests=data['specialRequests'],
        ))

        return Response({
            'success': True,
            'data': {
                'booking': BookingSerializer(booking).data,
                'order': order,
            }
        }, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=['post'], url_path='verify-payment')
    def verify_payment(self, request):
        serializer = VerifyPaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        booking, payment = PaymentVerificationService.verify(
            PaymentConfirmation(
                booking_id=data['bookingId'],
                payment_id=data['razorpay_payment_id'],
                order_id=data['razorpay_order_id'],
                signature=data['razorpay_signature'],
            ),
            request.user,
        )

        return Response({
            'success': True,
            'message': 'Payment verified successfully',
            'data': {
                'booking': BookingSerializer(booking).data,
                'payment': payment,
            }
        })

    @action(detail=True, methods=['put'])
    def cancel(self, request, pk=None):
        serializer = CancelBookingSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        booking = BookingService.cancel_booking(pk, request.user, serializer.validated_data['reason'])
        booking = self.get_queryset().get(pk=booking.pk)
        return Response({
            'success': True,
            'message': 'Booking cancelled successfully',
            'data': BookingSerializer(booking).data
        })

    @action(detail=True, methods=['put'])
    def complete(self, request, pk=None):
        booking = BookingService.complete_booking(pk, request.user)
        booking = self.get_queryset().get(pk=booking.pk)
        return Response({'success': True, 'data': BookingSerializer(booking).data})

    @action(detail=False, methods=['get'])
    def my(self, request):
        """Current user's bookings, optionally filtered by status"""
        queryset = self.filter_queryset(self.get_queryset().filter(user=request.user))
        return self.paginated_response(queryset)

    @action(detail=False, methods=['get'], url_path='payments/history')
    def payment_history(self, request):
        bookings = self.get_queryset().filter(
            user=request.user,
            payment_status__in=['paid', 'refunded']
        ).order_by('-created_at')
        data = PaymentHistorySerializer(bookings, many=True).data
        return Response({'success': True, 'count': len(data), 'data': data})

    @action(detail=True, methods=['get'])
    def invoice(self, request, pk=None):
        booking = self.get_object()
        return Response({'success': True, 'data': InvoiceSerializer(booking).data})


class OwnerBookingViewSet(PaginatedResponseMixin,
                          mixins.ListModelMixin,
                          viewsets.GenericViewSet):
    """Bookings made on the current owner's spots"""

    serializer_class = BookingSerializer
    lookup_value_regex = r'\d+'
    permission_classes = [permissions.IsAuthenticated, IsParkingOwner]
    filter_backends = [DjangoFilterBackend]
    filterset_fields = ['status', 'owner_decision', 'parking_spot']

    def get_queryset(self):
        return Booking.objects.filter(
            parking_spot__owner=self.request.user
        ).select_related('user', 'parking_spot', 'car')

    @action(detail=True, methods=['put'])
    def decision(self, request, pk=None):
        serializer = OwnerDecisionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        booking = BookingService.decide(
            pk,
            request.user,
            serializer.validated_data['decision'],
            serializer.validated_data['reason'],
        )
        booking = Booking.objects.select_related('user', 'parking_spot', 'car').get(pk=booking.pk)
        return Response({'success': True, 'data': BookingSerializer(booking).data})
