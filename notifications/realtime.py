"""Realtime event publishing over Redis pub/sub.

Events are published as ``{"event": name, "data": {...}}`` on the channel
named by ``settings.REALTIME_CHANNEL``; the socket gateway subscribes to that
channel and fans the events out to connected clients.
"""
import json
import logging

import redis
from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder

logger = logging.getLogger(__name__)

_client = None


def get_redis_client():
    global _client
    if _client is None:
        _client = redis.Redis.from_url(settings.REDIS_URL)
    return _client


def publish(event, payload):
    """Publish one event; returns the number of subscribers that received it"""
    message = json.dumps({'event': event, 'data': payload}, cls=DjangoJSONEncoder)
    receivers = get_redis_client().publish(settings.REALTIME_CHANNEL, message)
    logger.debug(f"Published {event} to {settings.REALTIME_CHANNEL} ({receivers} receivers)")
    return receivers
