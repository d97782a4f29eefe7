import threading
from unittest import skipIf
from unittest.mock import patch

from django.db import connection
from django.test import TransactionTestCase

from bookings.dtos import BookingRequest
from bookings.models import Booking
from bookings.services import BookingService
from parking.models import ParkingSpot
from users.models import CustomUser
from utils.exceptions import SlotUnavailable
from .helpers import gateway_settings, make_user, make_spot, patch_gateway_order, window

SLOTS = 3


@skipIf(connection.vendor == 'sqlite' and connection.settings_dict['TEST']['NAME'] in (None, ':memory:'),
        'threads need a shared on-disk test database')
@gateway_settings
class ConcurrentBookingTests(TransactionTestCase):

    def setUp(self):
        owner = make_user('owner', role=CustomUser.ROLE_PARKING_OWNER)
        self.spot = make_spot(owner, total_slots=SLOTS)
        self.customers = [make_user(f'driver{i}') for i in range(SLOTS + 1)]

    def _book_all_at_once(self):
        start, end = window()
        barrier = threading.Barrier(len(self.customers))
        booked, refused, errors = [], [], []

        def attempt(customer):
            try:
                barrier.wait()
                booking, _ = BookingService.create_booking(BookingRequest(
                    parking_spot_id=self.spot.id,
                    requester_id=customer.id,
                    start_time=start,
                    end_time=end,
                ))
                booked.append(booking.id)
            except SlotUnavailable:
                refused.append(customer.id)
            except Exception as e:
                errors.append(e)
            finally:
                connection.close()

        threads = [threading.Thread(target=attempt, args=(customer,)) for customer in self.customers]
        with patch_gateway_order(), patch('notifications.dispatch._enqueue'):
            for thread in threads:
                thread.start()
            for thread in threads:
                thread.join()
        return booked, refused, errors

    def test_one_driver_refused_when_slots_run_out(self):
        booked, refused, errors = self._book_all_at_once()

        self.assertEqual(errors, [])
        self.assertEqual(len(booked), SLOTS)
        self.assertEqual(len(refused), 1)
        self.assertEqual(Booking.objects.filter(parking_spot=self.spot).count(), SLOTS)
        self.assertEqual(ParkingSpot.objects.get(pk=self.spot.pk).available_slots, 0)
