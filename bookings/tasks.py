# ==================== BOOKINGS/TASKS.PY (CELERY TASKS) ====================
from celery import shared_task
from django.conf import settings
from django.core.mail import send_mail
from django.utils import timezone
from datetime import timedelta
import logging

from parking.slots import release_slot
from .models import Booking
from .services import slot_changed

logger = logging.getLogger(__name__)


@shared_task
def release_stale_pending_bookings():
    """Fail bookings left unpaid past the TTL and give their slots back"""
    cutoff = timezone.now() - timedelta(minutes=settings.PENDING_BOOKING_TTL_MINUTES)
    stale = Booking.objects.filter(
        status='pending',
        payment_status='pending',
        created_at__lt=cutoff,
    ).values_list('id', 'parking_spot_id')

    released = 0
    for booking_id, spot_id in stale:
        # Skips bookings a concurrent payment verification has just confirmed
        updated = Booking.objects.filter(pk=booking_id, status='pending', payment_status='pending').update(
            status='failed',
            payment_status='failed',
            failure_reason='Payment not completed in time',
            updated_at=timezone.now(),
        )
        if not updated:
            continue

        slot_changed(spot_id, release_slot(spot_id))
        released += 1

    logger.info(f"Expired {released} stale pending bookings")
    return released


@shared_task
def auto_complete_bookings():
    """Automatically complete bookings that have ended"""
    now = timezone.now()
    ended = Booking.objects.filter(end_time__lte=now, status='confirmed').values_list('id', 'parking_spot_id')

    completed = 0
    for booking_id, spot_id in ended:
        updated = Booking.objects.filter(pk=booking_id, status='confirmed').update(
            status='completed', updated_at=now
        )
        if not updated:
            continue

        slot_changed(spot_id, release_slot(spot_id))
        completed += 1

    logger.info(f"Auto-completed {completed} bookings")
    return completed


@shared_task
def send_booking_confirmation(booking_id):
    """Send booking confirmation email to the customer"""
    try:
        booking = Booking.objects.select_related('user', 'parking_spot').get(id=booking_id)
        spot = booking.parking_spot

        send_mail(
            f'Booking Confirmed - {booking.booking_code}',
            f'''
            Your booking has been confirmed:
            Booking: {booking.booking_code}
            Invoice: {booking.invoice_number}
            Location: {spot.title + ', ' + spot.address if spot else 'N/A'}
            Check-in: {booking.start_time}
            Check-out: {booking.end_time}
            Hours: {booking.hours}
            Amount: {booking.total_amount} {settings.PAYMENT_CURRENCY}
            ''',
            settings.DEFAULT_FROM_EMAIL,
            [booking.user.email],
            fail_silently=False,
        )
        logger.info(f"Confirmation email sent for booking {booking.booking_code}")
    except Exception as e:
        logger.error(f"Error sending booking confirmation: {str(e)}")


@shared_task
def send_booking_cancellation(booking_id):
    """Send cancellation email to the customer"""
    try:
        booking = Booking.objects.select_related('user', 'parking_spot').get(id=booking_id)
        spot = booking.parking_spot

        send_mail(
            f'Booking Cancelled - {booking.booking_code}',
            f'''
            Your booking has been cancelled.
            Booking: {booking.booking_code}
            Location: {spot.title if spot else 'N/A'}
            Reason: {booking.cancellation_reason}
            Payment status: {booking.get_payment_status_display()}
            ''',
            settings.DEFAULT_FROM_EMAIL,
            [booking.user.email],
            fail_silently=False,
        )
        logger.info(f"Cancellation email sent for booking {booking.booking_code}")
    except Exception as e:
        logger.error(f"Error sending cancellation email: {str(e)}")
