"""Shared fixtures for the test suite"""
import hashlib
import hmac
from datetime import timedelta
from decimal import Decimal
from unittest.mock import patch

from django.test import override_settings
from django.utils import timezone

from bookings.dtos import BookingRequest, PaymentConfirmation
from bookings.services import BookingService
from parking.models import ParkingSpot
from users.models import CustomUser
from utils.money import to_minor_units

TEST_KEY_ID = 'rzp_test_key'
TEST_KEY_SECRET = 'rzp_test_secret'

gateway_settings = override_settings(
    RAZORPAY_KEY_ID=TEST_KEY_ID,
    RAZORPAY_KEY_SECRET=TEST_KEY_SECRET,
    DEFAULT_COMMISSION_PERCENT='15',
)


def sign(order_id, payment_id, secret=TEST_KEY_SECRET):
    """Signature the gateway would send back for a captured payment"""
    message = f'{order_id}|{payment_id}'.encode()
    return hmac.new(secret.encode(), message, hashlib.sha256).hexdigest()


def fake_order(booking):
    return {
        'id': f'order_{booking.booking_code}',
        'amount': to_minor_units(booking.total_amount),
        'currency': 'INR',
    }


def patch_gateway_order(**kwargs):
    if not kwargs:
        kwargs['side_effect'] = fake_order
    return patch('payments.services.RazorpayService.create_order', **kwargs)


def make_user(username, role=CustomUser.ROLE_CUSTOMER, **extra):
    return CustomUser.objects.create_user(
        username=username,
        email=f'{username}@example.com',
        password='S3cure-pass!',
        role=role,
        **extra
    )


def make_spot(owner, total_slots=1, price_per_hour='100.00', **extra):
    return ParkingSpot.objects.create(
        owner=owner,
        title=extra.pop('title', 'Central Plaza Parking'),
        address=extra.pop('address', '12 MG Road'),
        city=extra.pop('city', 'Bengaluru'),
        total_slots=total_slots,
        available_slots=total_slots,
        price_per_hour=Decimal(price_per_hour),
        **extra
    )


def window(start_in_hours=1, duration_hours=2):
    start = timezone.now() + timedelta(hours=start_in_hours)
    return start, start + timedelta(hours=duration_hours)


class BookingFixtureMixin:
    """An owner with one 100/h single-slot spot and a customer"""

    def setUp(self):
        super().setUp()
        self.owner = make_user('owner', role=CustomUser.ROLE_PARKING_OWNER)
        self.customer = make_user('customer')
        self.spot = make_spot(self.owner)

    def book(self, user=None, spot=None, start_in_hours=1, duration_hours=2, **extra):
        start, end = window(start_in_hours, duration_hours)
        with patch_gateway_order():
            return BookingService.create_booking(BookingRequest(
                parking_spot_id=(spot or self.spot).id,
                requester_id=(user or self.customer).id,
                start_time=start,
                end_time=end,
                **extra
            ))

    def confirmation(self, booking, payment_id='pay_TEST123', signature=None):
        return PaymentConfirmation(
            booking_id=booking.id,
            payment_id=payment_id,
            order_id=booking.order_id,
            signature=signature if signature is not None else sign(booking.order_id, payment_id),
        )
