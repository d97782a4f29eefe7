# ==================== REVIEWS/VIEWS.PY ====================
from rest_framework import viewsets, permissions, status
from rest_framework.decorators import action
from rest_framework.response import Response

from utils.pagination import PaginatedResponseMixin
from .models import Review
from .serializers import ReviewSerializer, ReviewCreateSerializer, ReviewReplySerializer
from .services import ReviewService


class ReviewViewSet(PaginatedResponseMixin, viewsets.GenericViewSet):
    """Spot reviews: public per-spot listing, customer reviews, owner replies"""

    serializer_class = ReviewSerializer
    lookup_value_regex = r'\d+'
    queryset = Review.objects.select_related('customer', 'parking_spot')

    def get_permissions(self):
        if self.action == 'parking':
            permission_classes = [permissions.AllowAny]
        else:
            permission_classes = [permissions.IsAuthenticated]
        return [permission() for permission in permission_classes]

    def create(self, request):
        serializer = ReviewCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        review = ReviewService.create_review(
            serializer.validated_data['bookingId'],
            request.user,
            serializer.validated_data['rating'],
            serializer.validated_data['comment'],
        )
        return Response({'success': True, 'data': ReviewSerializer(review).data}, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=['get'], url_path=r'parking/(?P<spot_id>\d+)')
    def parking(self, request, spot_id=None):
        return self.paginated_response(self.get_queryset().filter(parking_spot_id=spot_id))

    @action(detail=False, methods=['get'])
    def my(self, request):
        """Reviews written by a customer, or received by an owner"""
        if request.user.is_parking_owner:
            queryset = self.get_queryset().filter(owner=request.user)
        else:
            queryset = self.get_queryset().filter(customer=request.user)
        return self.paginated_response(queryset)

    @action(detail=True, methods=['put'])
    def reply(self, request, pk=None):
        serializer = ReviewReplySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        review = ReviewService.reply(pk, request.user, serializer.validated_data['text'])
        return Response({'success': True, 'data': ReviewSerializer(review).data})
