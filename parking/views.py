# ============================= PARKINGSPOT VIEWS =============================
import logging

from rest_framework import viewsets, permissions, filters, status
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError
from rest_framework.response import Response
from django_filters.rest_framework import DjangoFilterBackend

from utils.pagination import PaginatedResponseMixin
from utils.permissions import IsParkingOwner, IsOwner
from .models import ParkingSpot, Favorite
from .serializers import ParkingSpotSerializer, MaintenanceModeSerializer, FavoriteSerializer
from .filters import ParkingSpotFilter

logger = logging.getLogger(__name__)


class ParkingSpotViewSet(PaginatedResponseMixin, viewsets.ModelViewSet):
    """Parking spot listing, creation, and management"""

    serializer_class = ParkingSpotSerializer
    lookup_value_regex = r'\d+'
    filter_backends = [
        DjangoFilterBackend,
        filters.SearchFilter,
        filters.OrderingFilter
    ]
    filterset_class = ParkingSpotFilter
    search_fields = ['title', 'address', 'city', 'description']
    ordering_fields = ['created_at', 'price_per_hour', 'available_slots']
    ordering = ['-created_at']

    def get_queryset(self):
        if self.action in ['list', 'retrieve']:
            queryset = ParkingSpot.objects.filter(is_approved=True, is_active=True).select_related('owner')
            if self.action == 'list':
                # Spots under maintenance stay reachable by id but drop out of search
                queryset = queryset.filter(is_maintenance_mode=False)
            return queryset
        return ParkingSpot.objects.select_related('owner')

    def get_permissions(self):
        if self.action in ['list', 'retrieve']:
            permission_classes = [permissions.AllowAny]
        else:
            permission_classes = [permissions.IsAuthenticated, IsParkingOwner, IsOwner]
        return [permission() for permission in permission_classes]

    @action(detail=False, methods=['get'])
    def mine(self, request):
        """Spots listed by the current owner"""
        spots = ParkingSpot.objects.filter(owner=request.user)
        serializer = self.get_serializer(spots, many=True)
        return Response({'success': True, 'count': len(serializer.data), 'data': serializer.data})

    @action(detail=True, methods=['put'])
    def maintenance(self, request, pk=None):
        """Toggle maintenance mode - a spot under maintenance takes no new bookings"""
        spot = self.get_object()
        if spot.owner != request.user:
            raise PermissionDenied('Not authorized for this parking spot')

        serializer = MaintenanceModeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        enabled = serializer.validated_data['enabled']
        spot.is_maintenance_mode = enabled
        spot.maintenance_reason = serializer.validated_data['reason'] if enabled else ''
        spot.save(update_fields=['is_maintenance_mode', 'maintenance_reason', 'updated_at'])

        logger.info(f"Maintenance mode {'enabled' if enabled else 'disabled'} for spot {spot.id}")
        return Response({'success': True, 'data': self.get_serializer(spot).data})


class FavoriteViewSet(viewsets.GenericViewSet):
    """Spots the current user has saved"""

    serializer_class = FavoriteSerializer
    permission_classes = [permissions.IsAuthenticated]
    pagination_class = None

    def get_queryset(self):
        return Favorite.objects.filter(user=self.request.user).select_related('parking_spot', 'parking_spot__owner')

    def list(self, request):
        # Spots that were deactivated or unapproved drop out of the list
        favorites = self.get_queryset().filter(parking_spot__is_active=True, parking_spot__is_approved=True)
        data = self.get_serializer(favorites, many=True).data
        return Response({'success': True, 'count': len(data), 'data': data})

    def add(self, request, parking_id=None):
        try:
            spot = ParkingSpot.objects.get(pk=parking_id)
        except ParkingSpot.DoesNotExist:
            raise NotFound('Parking spot not found')

        if not spot.is_active or not spot.is_approved:
            raise ValidationError('Only active approved parking spots can be favorited')

        favorite, created = Favorite.objects.get_or_create(user=request.user, parking_spot=spot)
        return Response({
            'success': True,
            'message': 'Parking spot added to favorites' if created else 'Parking spot already in favorites',
            'data': self.get_serializer(favorite).data
        }, status=status.HTTP_201_CREATED if created else status.HTTP_200_OK)

    def remove(self, request, parking_id=None):
        deleted, _ = self.get_queryset().filter(parking_spot_id=parking_id).delete()
        if not deleted:
            raise NotFound('Favorite not found')
        return Response({'success': True, 'message': 'Parking spot removed from favorites'})
