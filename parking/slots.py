"""Slot reservation guard.

``available_slots`` is the one counter that concurrent booking requests race
on, so it is only ever changed here, and only through single conditional
UPDATE statements. Nothing in this module reads the counter before writing it.
"""
import logging

from django.db.models import F
from django.db.models.functions import Least

from .models import ParkingSpot

logger = logging.getLogger(__name__)


def reserve_slot(spot_id):
    """Take one slot on the spot.

    Returns the refreshed ParkingSpot, or None when the spot is missing or has
    no free slot left.
    """
    updated = ParkingSpot.objects.filter(
        pk=spot_id,
        available_slots__gt=0,
    ).update(available_slots=F('available_slots') - 1)

    if not updated:
        logger.info(f"Slot reservation refused for spot {spot_id}: none available")
        return None

    return ParkingSpot.objects.get(pk=spot_id)


def release_slot(spot_id):
    """Give one slot back, never exceeding the spot's capacity.

    Returns the new available_slots value, or None if the spot no longer exists.
    """
    if spot_id is None:
        return None

    updated = ParkingSpot.objects.filter(pk=spot_id).update(
        available_slots=Least(F('available_slots') + 1, F('total_slots'))
    )
    if not updated:
        logger.warning(f"Slot release skipped: parking spot {spot_id} no longer exists")
        return None

    available = ParkingSpot.objects.filter(pk=spot_id).values_list('available_slots', flat=True).first()
    logger.info(f"Slot released on spot {spot_id}: {available} available")
    return available
