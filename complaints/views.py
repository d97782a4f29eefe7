# ==================== COMPLAINTS/VIEWS.PY ====================
import logging

from django.utils import timezone
from rest_framework import viewsets, permissions, status
from rest_framework.decorators import action
from rest_framework.response import Response
from django_filters.rest_framework import DjangoFilterBackend

from notifications import dispatch
from utils.pagination import PaginatedResponseMixin
from utils.permissions import IsPlatformAdmin
from .models import Complaint
from .serializers import ComplaintSerializer, ComplaintUpdateSerializer

logger = logging.getLogger(__name__)


class ComplaintViewSet(PaginatedResponseMixin, viewsets.GenericViewSet):
    """Users raise complaints; admins list and resolve them"""

    serializer_class = ComplaintSerializer
    lookup_value_regex = r'\d+'
    filter_backends = [DjangoFilterBackend]
    filterset_fields = ['status', 'category']

    def get_queryset(self):
        queryset = Complaint.objects.select_related('user')
        if self.request.user.is_platform_admin:
            return queryset
        return queryset.filter(user=self.request.user)

    def get_permissions(self):
        if self.action in ['list', 'update']:
            permission_classes = [permissions.IsAuthenticated, IsPlatformAdmin]
        else:
            permission_classes = [permissions.IsAuthenticated]
        return [permission() for permission in permission_classes]

    def create(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        complaint = serializer.save(user=request.user)

        dispatch.notify_admins(
            'New complaint',
            f'{request.user.username} raised a {complaint.category} complaint: {complaint.subject}',
            metadata={'complaintId': complaint.id},
        )
        logger.info(f"Complaint {complaint.id} raised by user {request.user.id}")
        return Response({'success': True, 'data': self.get_serializer(complaint).data}, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=['get'])
    def my(self, request):
        return self.paginated_response(self.get_queryset().filter(user=request.user))

    def update(self, request, pk=None):
        complaint = self.get_object()
        serializer = ComplaintUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        complaint.status = serializer.validated_data['status']
        if 'resolution' in serializer.validated_data:
            complaint.resolution = serializer.validated_data['resolution']
        if complaint.status in ['resolved', 'rejected']:
            complaint.resolved_by = request.user
            complaint.resolved_at = timezone.now()
        complaint.save()

        dispatch.notify(
            complaint.user_id, 'Complaint updated',
            f'Your complaint "{complaint.subject}" is now {complaint.get_status_display()}.',
            metadata={'complaintId': complaint.id},
        )
        logger.info(f"Complaint {complaint.id} set to {complaint.status} by {request.user.username}")
        return Response({'success': True, 'data': self.get_serializer(complaint).data})
