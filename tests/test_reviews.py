from datetime import timedelta
from decimal import Decimal

from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError
from rest_framework.test import APITestCase

from bookings.models import Booking
from payments.services import PaymentVerificationService
from reviews.models import Review
from reviews.services import ReviewService
from users.models import CustomUser
from .helpers import BookingFixtureMixin, gateway_settings, make_user, make_spot


class PaidStayMixin(BookingFixtureMixin):
    """A paid booking whose time window has already ended"""

    def setUp(self):
        super().setUp()
        self.spot = make_spot(self.owner, total_slots=3, title='Station Road Garage')

    def paid_stay(self, user=None, spot=None):
        booking, _ = self.book(user=user, spot=spot)
        PaymentVerificationService.verify(self.confirmation(booking), user or self.customer)
        now = timezone.now()
        Booking.objects.filter(pk=booking.pk).update(
            start_time=now - timedelta(hours=3), end_time=now - timedelta(hours=1)
        )
        return booking


@gateway_settings
class ReviewServiceTests(PaidStayMixin, TestCase):

    def setUp(self):
        super().setUp()
        self.booking = self.paid_stay()

    def test_review_updates_spot_rating(self):
        review = ReviewService.create_review(self.booking.id, self.customer, 4, 'Easy to find')

        self.assertEqual(review.owner, self.owner)
        self.assertEqual(review.parking_spot, self.spot)
        self.spot.refresh_from_db()
        self.assertEqual(self.spot.rating_average, Decimal('4.00'))
        self.assertEqual(self.spot.rating_count, 1)

    def test_average_over_several_reviews(self):
        ReviewService.create_review(self.booking.id, self.customer, 5)
        other = make_user('second')
        ReviewService.create_review(self.paid_stay(user=other).id, other, 2)
        third = make_user('third')
        ReviewService.create_review(self.paid_stay(user=third).id, third, 4)

        self.spot.refresh_from_db()
        # 11 / 3
        self.assertEqual(self.spot.rating_average, Decimal('3.67'))
        self.assertEqual(self.spot.rating_count, 3)

    def test_one_review_per_booking(self):
        ReviewService.create_review(self.booking.id, self.customer, 5)

        with self.assertRaisesMessage(ValidationError, 'Review already submitted for this booking'):
            ReviewService.create_review(self.booking.id, self.customer, 3)

        self.assertEqual(Review.objects.count(), 1)

    def test_only_booking_user_can_review(self):
        with self.assertRaisesMessage(PermissionDenied, 'Not authorized to review this booking'):
            ReviewService.create_review(self.booking.id, make_user('stranger'), 1)

    def test_unpaid_booking(self):
        Booking.objects.filter(pk=self.booking.pk).update(payment_status='pending')

        with self.assertRaisesMessage(ValidationError, 'Only paid bookings can be reviewed'):
            ReviewService.create_review(self.booking.id, self.customer, 5)

    def test_stay_not_over_yet(self):
        Booking.objects.filter(pk=self.booking.pk).update(end_time=timezone.now() + timedelta(hours=1))

        with self.assertRaisesMessage(ValidationError, 'You can review only after booking end time'):
            ReviewService.create_review(self.booking.id, self.customer, 5)

    def test_missing_booking(self):
        with self.assertRaises(NotFound):
            ReviewService.create_review(999999, self.customer, 5)

    def test_owner_reply(self):
        review = ReviewService.create_review(self.booking.id, self.customer, 3)

        review = ReviewService.reply(review.id, self.owner, 'Thanks, we fixed the lighting.')

        self.assertEqual(review.owner_reply, 'Thanks, we fixed the lighting.')
        self.assertIsNotNone(review.owner_replied_at)

    def test_reply_by_someone_else(self):
        review = ReviewService.create_review(self.booking.id, self.customer, 3)

        with self.assertRaisesMessage(PermissionDenied, 'Not authorized to reply to this review'):
            ReviewService.reply(review.id, make_user('intruder', role=CustomUser.ROLE_PARKING_OWNER), 'Hi')

    def test_owner_notified_after_commit(self):
        with self.captureOnCommitCallbacks() as callbacks:
            ReviewService.create_review(self.booking.id, self.customer, 5)

        self.assertEqual(len(callbacks), 1)


@gateway_settings
class ReviewAPITests(PaidStayMixin, APITestCase):

    def setUp(self):
        super().setUp()
        self.booking = self.paid_stay()

    def test_create_and_list_by_spot(self):
        self.client.force_authenticate(user=self.customer)

        response = self.client.post('/api/v1/reviews/', {
            'bookingId': self.booking.id,
            'rating': 5,
            'comment': 'Smooth entry',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.json()['data']['rating'], 5)

        self.client.force_authenticate(user=None)
        body = self.client.get(f'/api/v1/reviews/parking/{self.spot.id}/').json()
        self.assertTrue(body['success'])
        self.assertEqual(body['count'], 1)
        self.assertEqual(body['data'][0]['customer_name'], 'customer')

    def test_rating_out_of_range(self):
        self.client.force_authenticate(user=self.customer)

        response = self.client.post('/api/v1/reviews/', {'bookingId': self.booking.id, 'rating': 6}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(Review.objects.exists())

    def test_my_reviews_by_role(self):
        ReviewService.create_review(self.booking.id, self.customer, 4)
        other_spot = make_spot(make_user('rival', role=CustomUser.ROLE_PARKING_OWNER), title='Rival Lot')
        other = make_user('second')
        ReviewService.create_review(self.paid_stay(user=other, spot=other_spot).id, other, 2)

        self.client.force_authenticate(user=self.owner)
        received = self.client.get('/api/v1/reviews/my/').json()
        self.assertEqual(received['count'], 1)
        self.assertEqual(received['data'][0]['rating'], 4)

        self.client.force_authenticate(user=other)
        given = self.client.get('/api/v1/reviews/my/').json()
        self.assertEqual(given['count'], 1)
        self.assertEqual(given['data'][0]['parking_spot_title'], 'Rival Lot')

    def test_owner_reply(self):
        review = ReviewService.create_review(self.booking.id, self.customer, 2)
        self.client.force_authenticate(user=self.owner)

        response = self.client.put(f'/api/v1/reviews/{review.id}/reply/', {'text': 'Sorry about the wait'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()['data']['owner_reply'], 'Sorry about the wait')

        self.client.force_authenticate(user=self.customer)
        response = self.client.put(f'/api/v1/reviews/{review.id}/reply/', {'text': 'Me too'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
