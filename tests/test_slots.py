from django.test import TestCase

from parking.models import ParkingSpot
from parking.slots import reserve_slot, release_slot
from users.models import CustomUser
from .helpers import make_user, make_spot


class SlotReservationTests(TestCase):
    def setUp(self):
        self.owner = make_user('owner', role=CustomUser.ROLE_PARKING_OWNER)
        self.spot = make_spot(self.owner, total_slots=3)

    def test_reserve_decrements_and_returns_fresh_spot(self):
        spot = reserve_slot(self.spot.id)

        self.assertIsNotNone(spot)
        self.assertEqual(spot.available_slots, 2)

    def test_never_oversells(self):
        results = [reserve_slot(self.spot.id) for _ in range(5)]

        self.assertEqual(sum(1 for r in results if r is not None), 3)
        self.spot.refresh_from_db()
        self.assertEqual(self.spot.available_slots, 0)

    def test_reserve_missing_spot(self):
        self.assertIsNone(reserve_slot(999999))

    def test_release_is_clamped_to_capacity(self):
        reserve_slot(self.spot.id)

        self.assertEqual(release_slot(self.spot.id), 3)
        self.assertEqual(release_slot(self.spot.id), 3)

        self.spot.refresh_from_db()
        self.assertEqual(self.spot.available_slots, 3)

    def test_release_missing_spot(self):
        self.assertIsNone(release_slot(999999))
        self.assertIsNone(release_slot(None))


class ParkingSpotModelTests(TestCase):
    def setUp(self):
        self.owner = make_user('owner', role=CustomUser.ROLE_PARKING_OWNER)

    def test_available_slots_clamped_on_save(self):
        spot = make_spot(self.owner, total_slots=2)
        spot.available_slots = 10
        spot.save()

        spot.refresh_from_db()
        self.assertEqual(spot.available_slots, 2)

    def test_bookable_flags(self):
        spot = make_spot(self.owner)
        self.assertTrue(spot.is_bookable)

        spot.is_maintenance_mode = True
        self.assertFalse(spot.is_bookable)

        spot.is_maintenance_mode = False
        spot.is_approved = False
        self.assertFalse(spot.is_bookable)

    def test_spot_created_with_full_availability(self):
        spot = ParkingSpot.objects.create(
            owner=self.owner, title='Lot', address='1 Street', city='Pune',
            total_slots=4, available_slots=None, price_per_hour='40.00'
        )
        self.assertEqual(spot.available_slots, 4)
