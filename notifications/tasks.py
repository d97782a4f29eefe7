# ==================== NOTIFICATIONS/TASKS.PY (CELERY TASKS) ====================
from celery import shared_task
import logging

logger = logging.getLogger(__name__)


@shared_task
def broadcast_event(event, payload):
    """Push a realtime event to the socket gateway"""
    from .realtime import publish

    try:
        publish(event, payload)
    except Exception as e:
        logger.error(f"Error broadcasting {event}: {str(e)}")


@shared_task
def create_notification(user_id, title, message, type='system', metadata=None):
    """Store an in-app notification and announce it"""
    from .models import Notification
    from .serializers import NotificationSerializer

    notification = Notification.objects.create(
        user_id=user_id,
        title=title[:120],
        message=message[:500],
        type=type,
        metadata=metadata or {},
    )

    broadcast_event(
        'notificationCreated',
        {'userId': user_id, 'notification': dict(NotificationSerializer(notification).data)},
    )
    return notification.id


@shared_task
def notify_admins(title, message, type='admin', metadata=None):
    """Fan a notification out to every platform admin"""
    from users.models import CustomUser
    from django.db.models import Q

    admin_ids = CustomUser.objects.filter(
        Q(role=CustomUser.ROLE_ADMIN) | Q(is_superuser=True),
        is_active=True,
    ).values_list('id', flat=True)

    for admin_id in admin_ids:
        create_notification(admin_id, title, message, type, metadata)
