# ==================== PAYMENTS/SERVICES.PY ====================
import razorpay
import logging
from decimal import Decimal
from django.conf import settings
from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError

from bookings.models import Booking
from ledger.services import LedgerService
from notifications import dispatch
from parking.models import ParkingSpot
from parking.slots import release_slot
from utils.exceptions import (
    PaymentGatewayUnavailable, SignatureVerificationFailed, SpotNoLongerExists,
    AlreadyProcessed, BookingNotPayable
)
from utils.money import round2, to_minor_units, as_float
from .models import PlatformSetting

logger = logging.getLogger(__name__)


class RazorpayService:
    """Razorpay payment gateway integration"""

    def __init__(self):
        if not settings.RAZORPAY_KEY_ID or not settings.RAZORPAY_KEY_SECRET:
            logger.error("Razorpay credentials are not configured")
            raise PaymentGatewayUnavailable()

        self.client = razorpay.Client(
            auth=(settings.RAZORPAY_KEY_ID, settings.RAZORPAY_KEY_SECRET)
        )

    def create_order(self, booking):
        """Create Razorpay order for the booking total"""
        order_data = {
            'amount': to_minor_units(booking.total_amount),  # Amount in paise
            'currency': settings.PAYMENT_CURRENCY,
            'receipt': booking.booking_code,
            'notes': {
                'booking_id': str(booking.id),
                'booking_code': booking.booking_code,
                'user': booking.user.username,
            }
        }

        try:
            razorpay_order = self.client.order.create(data=order_data)
        except Exception as e:
            logger.error(f"Error creating Razorpay order for booking {booking.id}: {str(e)}")
            raise PaymentGatewayUnavailable()

        logger.info(f"Razorpay order created: {razorpay_order['id']} for booking {booking.id}")
        return razorpay_order

    def verify_payment(self, razorpay_order_id, razorpay_payment_id, razorpay_signature):
        """Verify Razorpay payment signature (HMAC-SHA256 of order_id|payment_id)"""
        try:
            self.client.utility.verify_payment_signature({
                'razorpay_order_id': razorpay_order_id,
                'razorpay_payment_id': razorpay_payment_id,
                'razorpay_signature': razorpay_signature
            })
        except razorpay.errors.SignatureVerificationError:
            logger.warning(f"Signature verification failed for payment: {razorpay_payment_id}")
            return False

        logger.info(f"Payment verified: {razorpay_payment_id}")
        return True


class CommissionService:
    """Platform commission on paid bookings"""

    @staticmethod
    def get_commission_percent():
        return PlatformSetting.load().commission_percent

    @staticmethod
    def validate_percent(percent):
        percent = Decimal(str(percent))
        if percent < 0 or percent > 100:
            raise ValidationError('Commission percent must be between 0 and 100')
        return percent

    @staticmethod
    def update_commission_percent(percent, updated_by=None):
        setting = PlatformSetting.load()
        setting.commission_percent = round2(CommissionService.validate_percent(percent))
        setting.updated_by = updated_by
        setting.save(update_fields=['commission_percent', 'updated_by', 'updated_at'])
        logger.info(f"Commission set to {setting.commission_percent}% by {getattr(updated_by, 'username', 'system')}")
        return setting

    @staticmethod
    def split(total_amount, commission_percent):
        """Returns (platform_fee, owner_earnings); the two always add up to the total"""
        total = round2(total_amount)
        platform_fee = round2(total * round2(commission_percent) / 100)
        return platform_fee, total - platform_fee


class PaymentVerificationService:
    """Turns a gateway payment confirmation into a confirmed booking and owner earnings"""

    @staticmethod
    def _mark_failed(booking_id, reason):
        return Booking.objects.filter(
            pk=booking_id, status='pending', payment_status='pending'
        ).update(status='failed', payment_status='failed', failure_reason=reason, updated_at=timezone.now())

    @staticmethod
    def verify(confirmation, requester, commission_percent=None):
        # Read once so a concurrent settings change cannot alter this split midway
        if commission_percent is None:
            commission_percent = CommissionService.get_commission_percent()
        commission_percent = CommissionService.validate_percent(commission_percent)

        try:
            booking = Booking.objects.select_related('parking_spot', 'user').get(pk=confirmation.booking_id)
        except Booking.DoesNotExist:
            raise NotFound('Booking not found')

        if booking.user_id != requester.id:
            raise PermissionDenied('Not authorized to pay for this booking')

        if confirmation.order_id != booking.order_id:
            raise ValidationError('Order does not match this booking')

        if booking.payment_status == 'paid':
            raise AlreadyProcessed()
        if booking.status != 'pending' or booking.payment_status != 'pending':
            raise BookingNotPayable()

        gateway = RazorpayService()
        if not gateway.verify_payment(booking.order_id, confirmation.payment_id, confirmation.signature):
            if PaymentVerificationService._mark_failed(booking.id, 'Payment verification failed'):
                available = release_slot(booking.parking_spot_id)
                if available is not None:
                    dispatch.broadcast('slotUpdated', {'parkingId': booking.parking_spot_id, 'availableSlots': available})
            raise SignatureVerificationFailed()

        spot = ParkingSpot.objects.filter(pk=booking.parking_spot_id).first()
        if spot is None:
            PaymentVerificationService._mark_failed(booking.id, 'Parking spot no longer exists')
            logger.warning(f"Payment {confirmation.payment_id} arrived for booking {booking.id} whose spot is gone")
            raise SpotNoLongerExists()

        platform_fee, owner_earnings = CommissionService.split(booking.total_amount, commission_percent)

        with transaction.atomic():
            invoice_number = booking.assign_invoice_number()
            updated = Booking.objects.filter(
                pk=booking.id, status='pending', payment_status='pending'
            ).update(
                status='confirmed',
                payment_status='paid',
                payment_id=confirmation.payment_id,
                razorpay_signature=confirmation.signature,
                invoice_number=invoice_number,
                updated_at=timezone.now(),
            )
            if not updated:
                raise AlreadyProcessed()

            entry_fields = {
                'booking': booking,
                'payment_method': 'razorpay',
                'razorpay_payment_id': confirmation.payment_id,
                'metadata': {
                    'bookingCode': booking.booking_code,
                    'commissionPercent': str(commission_percent),
                },
            }
            if owner_earnings > 0:
                LedgerService.credit(
                    spot.owner_id, owner_earnings, entry_type='earning',
                    description=f'Earnings for booking {booking.booking_code}', **entry_fields
                )
            else:
                LedgerService.record_entry(
                    spot.owner_id, owner_earnings, 'earning',
                    description=f'Earnings for booking {booking.booking_code}', **entry_fields
                )
            LedgerService.record_entry(
                spot.owner_id, -platform_fee, 'platform_fee',
                description=f'Platform fee for booking {booking.booking_code}', **entry_fields
            )

            booking.refresh_from_db()
            PaymentVerificationService._announce(booking, spot)

        logger.info(
            f"Payment verified for booking {booking.booking_code}: total {booking.total_amount}, "
            f"fee {platform_fee}, owner earnings {owner_earnings}"
        )
        return booking, {
            'amount': as_float(booking.total_amount),
            'ownerEarnings': as_float(owner_earnings),
            'platformFee': as_float(platform_fee),
        }

    @staticmethod
    def _announce(booking, spot):
        from bookings.tasks import send_booking_confirmation

        total_bookings = Booking.objects.filter(parking_spot_id=spot.id, status='confirmed').count()
        dispatch.broadcast('bookingConfirmed', {
            'bookingId': booking.id,
            'parkingId': spot.id,
            'availableSlots': spot.available_slots,
            'totalBookings': total_bookings,
        })
        dispatch.enqueue(send_booking_confirmation, booking.id)

        dispatch.notify(
            booking.user_id, 'Booking confirmed',
            f'Your booking {booking.booking_code} at {spot.title} is confirmed.',
            type='booking', metadata={'bookingId': booking.id},
        )
        if spot.owner_id != booking.user_id:
            dispatch.notify(
                spot.owner_id, 'New paid booking',
                f'Booking {booking.booking_code} at {spot.title} was paid.',
                type='payment', metadata={'bookingId': booking.id},
            )
        dispatch.notify_admins(
            'Payment received',
            f'Booking {booking.booking_code} paid {booking.total_amount}.',
            metadata={'bookingId': booking.id},
        )
