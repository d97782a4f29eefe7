"""Fire-and-forget side effects.

Everything here is queued on Celery only after the surrounding database
transaction commits, and a failure to enqueue is logged and dropped: the
request that triggered it has already succeeded.
"""
import logging

from django.db import transaction

from .tasks import broadcast_event, create_notification, notify_admins as notify_admins_task

logger = logging.getLogger(__name__)


def _enqueue(task, *args):
    def _send():
        try:
            task.delay(*args)
        except Exception as e:
            logger.error(f"Failed to enqueue {task.name}: {str(e)}")

    transaction.on_commit(_send)


def broadcast(event, payload):
    _enqueue(broadcast_event, event, payload)


def notify(user_id, title, message, type='system', metadata=None):
    _enqueue(create_notification, user_id, title, message, type, metadata or {})


def notify_admins(title, message, type='admin', metadata=None):
    _enqueue(notify_admins_task, title, message, type, metadata or {})


def enqueue(task, *args):
    """Queue any other Celery task after commit"""
    _enqueue(task, *args)
