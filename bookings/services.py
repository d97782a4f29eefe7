# ==================== BOOKINGS/SERVICES.PY ====================
import math
import logging

from django.conf import settings
from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound, PermissionDenied

from ledger.models import Transaction
from ledger.services import LedgerService
from notifications import dispatch
from parking.models import ParkingSpot
from parking.slots import reserve_slot, release_slot
from payments.services import RazorpayService
from users.models import Car
from utils.exceptions import (
    SpotUnavailable, InvalidTimeRange, InvalidDuration, SlotUnavailable, PaymentGatewayUnavailable,
    AlreadyCancelled, CannotCancelCompleted, InvalidBookingState, InsufficientBalance, LedgerIntegrityError
)
from utils.money import round2
from .models import Booking

logger = logging.getLogger(__name__)


def slot_changed(spot_id, available_slots):
    """Announce a new free-slot count once the change is committed"""
    if available_slots is None:
        return
    dispatch.broadcast('slotUpdated', {'parkingId': spot_id, 'availableSlots': available_slots})


class BookingService:
    """Booking lifecycle: create, cancel, owner decision and completion"""

    @staticmethod
    def _get_for_update(booking_id):
        try:
            return Booking.objects.select_for_update().get(pk=booking_id)
        except Booking.DoesNotExist:
            raise NotFound('Booking not found')

    @staticmethod
    def calculate_hours(start_time, end_time):
        """Billable hours, any started hour counts as a full one"""
        return math.ceil((end_time - start_time).total_seconds() / 3600)

    @staticmethod
    def create_booking(booking_request):
        """Reserve a slot, create the pending booking and open a gateway order.

        Returns (booking, order) where order is what the client needs to start
        checkout: ``{id, amount, currency, key}``.
        """
        try:
            spot = ParkingSpot.objects.get(pk=booking_request.parking_spot_id)
        except ParkingSpot.DoesNotExist:
            raise NotFound('Parking spot not found')

        if not spot.is_bookable:
            raise SpotUnavailable()

        start, end = booking_request.start_time, booking_request.end_time
        if start < timezone.now():
            raise InvalidTimeRange('Start time cannot be in the past')
        if end <= start:
            raise InvalidTimeRange('End time must be after start time')

        hours = BookingService.calculate_hours(start, end)
        if hours <= 0:
            raise InvalidDuration()
        if hours > settings.MAX_BOOKING_HOURS:
            raise InvalidDuration(f'Maximum booking duration is {settings.MAX_BOOKING_HOURS} hours')

        # Server side price, whatever the client believes it costs
        total_amount = round2(spot.price_per_hour * hours)

        car = None
        if booking_request.car_id is not None:
            car = Car.objects.filter(pk=booking_request.car_id, owner_id=booking_request.requester_id).first()
            if car is None:
                raise NotFound('Car not found')

        overlapping = Booking.objects.filter(
            parking_spot_id=spot.id,
            status__in=Booking.ACTIVE_STATUSES,
            start_time__lt=end,
            end_time__gt=start,
        ).count()
        if overlapping >= spot.total_slots:
            raise SlotUnavailable('No slot available for the selected time range')

        reserved = reserve_slot(spot.id)
        if reserved is None:
            raise SlotUnavailable()

        try:
            booking = Booking.objects.create(
                user_id=booking_request.requester_id,
                parking_spot=spot,
                car=car,
                start_time=start,
                end_time=end,
                hours=hours,
                total_amount=total_amount,
                special_requests=booking_request.special_requests or '',
            )
        except Exception as e:
            available = release_slot(spot.id)
            logger.error(f"Booking insert failed on spot {spot.id}, slot released: {str(e)}")
            slot_changed(spot.id, available)
            raise

        try:
            order = RazorpayService().create_order(booking)
        except Exception as e:
            booking_id = booking.id
            booking.delete()
            available = release_slot(spot.id)
            logger.warning(f"Order creation failed for booking {booking_id}, slot released on spot {spot.id}: {str(e)}")
            slot_changed(spot.id, available)
            raise PaymentGatewayUnavailable()

        booking.order_id = order['id']
        booking.save(update_fields=['order_id', 'updated_at'])
        logger.info(f"Booking {booking.booking_code} created on spot {spot.id}: {hours}h, {total_amount}")

        slot_changed(spot.id, reserved.available_slots)
        BookingService._announce_created(booking, spot)

        return booking, {
            'id': order['id'],
            'amount': order['amount'],
            'currency': order['currency'],
            'key': settings.RAZORPAY_KEY_ID,
        }

    @staticmethod
    def _announce_created(booking, spot):
        metadata = {'bookingId': booking.id, 'parkingId': spot.id}
        dispatch.notify(
            booking.user_id, 'Booking Created',
            f'Booking {booking.booking_code} created for {spot.title}. Complete payment to confirm.',
            type='booking', metadata=metadata,
        )
        if spot.owner_id != booking.user_id:
            dispatch.notify(
                spot.owner_id, 'New Booking Request',
                f'A new booking {booking.booking_code} was created for your spot.',
                type='booking', metadata=metadata,
            )
        dispatch.notify_admins('New Booking Created', f'Booking {booking.booking_code} created.', metadata=metadata)

    @staticmethod
    def cancel_booking(booking_id, requester, reason=None):
        """Customer cancellation; paid bookings get their owner earning reversed"""
        from .tasks import send_booking_cancellation

        with transaction.atomic():
            booking = BookingService._get_for_update(booking_id)

            if booking.user_id != requester.id:
                raise PermissionDenied('Not authorized to cancel this booking')
            if booking.status == 'cancelled':
                raise AlreadyCancelled()
            if booking.status == 'completed':
                raise CannotCancelCompleted()
            if booking.status == 'failed':
                raise InvalidBookingState('Cannot cancel a failed booking')

            was_paid = booking.payment_status == 'paid'
            booking.status = 'cancelled'
            booking.cancellation_reason = reason or 'User cancelled'
            booking.cancelled_at = timezone.now()
            if was_paid:
                booking.payment_status = 'refunded'
            booking.save(update_fields=['status', 'cancellation_reason', 'cancelled_at', 'payment_status', 'updated_at'])

            available = release_slot(booking.parking_spot_id)
            if was_paid:
                BookingService._reverse_earning(booking)

            slot_changed(booking.parking_spot_id, available)
            dispatch.enqueue(send_booking_cancellation, booking.id)

            spot = ParkingSpot.objects.filter(pk=booking.parking_spot_id).first()
            metadata = {'bookingId': booking.id, 'parkingId': booking.parking_spot_id}
            dispatch.notify(
                booking.user_id, 'Booking Cancelled',
                f'Booking {booking.booking_code} has been cancelled.',
                type='booking', metadata=metadata,
            )
            if spot is not None and spot.owner_id != booking.user_id:
                dispatch.notify(
                    spot.owner_id, 'Booking Cancelled',
                    f'A booking {booking.booking_code} for your spot was cancelled.',
                    type='booking', metadata=metadata,
                )

        logger.info(f"Booking {booking.booking_code} cancelled by {requester.username} (paid: {was_paid})")
        return booking

    @staticmethod
    def _reverse_earning(booking):
        """Take back exactly what the owner was credited for this booking"""
        earning = Transaction.objects.filter(booking=booking, type='earning').order_by('created_at').first()
        if earning is None or earning.amount <= 0:
            logger.warning(f"No owner earning to reverse for cancelled booking {booking.booking_code}")
            return None

        try:
            return LedgerService.debit(
                earning.user_id,
                earning.amount,
                entry_type='refund',
                booking=booking,
                payment_method='razorpay',
                razorpay_payment_id=booking.payment_id,
                description=f'Refund for cancelled booking {booking.booking_code}',
                metadata={
                    'originalAmount': str(booking.total_amount),
                    'earningTransactionId': earning.id,
                    'cancellationReason': booking.cancellation_reason,
                },
            )
        except InsufficientBalance:
            logger.critical(
                f"Owner {earning.user_id} cannot cover the reversal of {earning.amount} "
                f"for booking {booking.booking_code}; cancellation rolled back"
            )
            raise LedgerIntegrityError()

    @staticmethod
    def decide(booking_id, owner, decision, reason=''):
        """Spot owner accepts or rejects a booking on their spot"""
        with transaction.atomic():
            booking = BookingService._get_for_update(booking_id)
            spot = ParkingSpot.objects.filter(pk=booking.parking_spot_id).first()
            if spot is None or spot.owner_id != owner.id:
                raise PermissionDenied('Not authorized for this booking')
            if booking.is_terminal:
                raise InvalidBookingState(f'Booking is already {booking.status}')

            booking.owner_decision = decision
            booking.owner_decision_reason = reason or ''
            booking.owner_decision_at = timezone.now()
            fields = ['owner_decision', 'owner_decision_reason', 'owner_decision_at', 'updated_at']

            if decision == 'rejected' and booking.status == 'pending':
                booking.status = 'cancelled'
                booking.cancellation_reason = reason or 'Rejected by parking owner'
                booking.cancelled_at = timezone.now()
                fields += ['status', 'cancellation_reason', 'cancelled_at']
                booking.save(update_fields=fields)
                slot_changed(spot.id, release_slot(spot.id))
            else:
                booking.save(update_fields=fields)

            dispatch.notify(
                booking.user_id, f'Booking {decision}',
                f'The owner of {spot.title} {decision} booking {booking.booking_code}.',
                type='booking', metadata={'bookingId': booking.id, 'parkingId': spot.id},
            )

        logger.info(f"Booking {booking.booking_code} {decision} by owner {owner.username}")
        return booking

    @staticmethod
    def complete_booking(booking_id, actor):
        """Spot owner or admin closes a booking and frees its slot"""
        with transaction.atomic():
            booking = BookingService._get_for_update(booking_id)
            spot = ParkingSpot.objects.filter(pk=booking.parking_spot_id).first()
            is_owner = spot is not None and spot.owner_id == actor.id
            if not is_owner and not actor.is_platform_admin:
                raise PermissionDenied('Not authorized to complete this booking')
            if booking.status in ('cancelled', 'failed'):
                raise InvalidBookingState('Cannot complete cancelled/failed booking')
            if booking.status == 'completed':
                raise InvalidBookingState('Booking already completed')

            booking.status = 'completed'
            booking.save(update_fields=['status', 'updated_at'])
            slot_changed(booking.parking_spot_id, release_slot(booking.parking_spot_id))

            dispatch.notify(
                booking.user_id, 'Booking Completed',
                f'Booking {booking.booking_code} has been marked completed.',
                type='booking', metadata={'bookingId': booking.id, 'parkingId': booking.parking_spot_id},
            )

        logger.info(f"Booking {booking.booking_code} completed by {actor.username}")
        return booking
