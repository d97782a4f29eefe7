# ==================== NOTIFICATIONS/VIEWS.PY ====================
from rest_framework import viewsets, permissions
from rest_framework.decorators import action
from rest_framework.response import Response

from utils.pagination import PaginatedResponseMixin
from .models import Notification
from .serializers import NotificationSerializer


class NotificationViewSet(PaginatedResponseMixin, viewsets.ReadOnlyModelViewSet):
    """The current user's in-app notifications"""

    serializer_class = NotificationSerializer
    lookup_value_regex = r'\d+'
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        return Notification.objects.filter(user=self.request.user)

    def list(self, request, *args, **kwargs):
        queryset = self.get_queryset()
        return self.paginated_response(queryset, unreadCount=queryset.filter(read=False).count())

    @action(detail=True, methods=['put'])
    def read(self, request, pk=None):
        notification = self.get_object()
        if not notification.read:
            notification.read = True
            notification.save(update_fields=['read'])
        return Response({'success': True, 'data': self.get_serializer(notification).data})

    @action(detail=False, methods=['put'], url_path='read-all')
    def read_all(self, request):
        updated = self.get_queryset().filter(read=False).update(read=True)
        return Response({'success': True, 'data': {'updated': updated}})
