# ==================== REVIEWS/SERVICES.PY ====================
import logging

from django.db import transaction
from django.db.models import Avg, Count
from django.utils import timezone
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError

from bookings.models import Booking
from notifications import dispatch
from parking.models import ParkingSpot
from utils.money import round2
from .models import Review

logger = logging.getLogger(__name__)


class ReviewService:

    @staticmethod
    def refresh_spot_rating(spot_id):
        stats = Review.objects.filter(parking_spot_id=spot_id).aggregate(average=Avg('rating'), count=Count('id'))
        average = round2(stats['average'] or 0)
        ParkingSpot.objects.filter(pk=spot_id).update(rating_average=average, rating_count=stats['count'])
        return average, stats['count']

    @staticmethod
    def create_review(booking_id, customer, rating, comment=''):
        """Review a paid booking once its time window is over"""
        try:
            booking = Booking.objects.select_related('parking_spot').get(pk=booking_id)
        except Booking.DoesNotExist:
            raise NotFound('Booking not found')

        if booking.user_id != customer.id:
            raise PermissionDenied('Not authorized to review this booking')
        if booking.payment_status != 'paid':
            raise ValidationError('Only paid bookings can be reviewed')
        if booking.end_time > timezone.now():
            raise ValidationError('You can review only after booking end time')
        if booking.parking_spot is None:
            raise ValidationError('Parking spot no longer exists')
        if Review.objects.filter(booking=booking).exists():
            raise ValidationError('Review already submitted for this booking')

        spot = booking.parking_spot
        with transaction.atomic():
            review = Review.objects.create(
                booking=booking,
                parking_spot=spot,
                customer=customer,
                owner_id=spot.owner_id,
                rating=rating,
                comment=comment,
            )
            average, count = ReviewService.refresh_spot_rating(spot.id)

            dispatch.notify(
                spot.owner_id, 'New Review',
                f'{customer.username} rated {spot.title} {rating}/5.',
                type='review', metadata={'reviewId': review.id, 'parkingId': spot.id},
            )

        logger.info(f"Review {review.id} on spot {spot.id}: {rating}/5, spot now {average} over {count}")
        return review

    @staticmethod
    def reply(review_id, user, text):
        try:
            review = Review.objects.get(pk=review_id)
        except Review.DoesNotExist:
            raise NotFound('Review not found')

        if review.owner_id != user.id and not user.is_platform_admin:
            raise PermissionDenied('Not authorized to reply to this review')

        review.owner_reply = text
        review.owner_replied_at = timezone.now()
        review.save(update_fields=['owner_reply', 'owner_replied_at', 'updated_at'])

        dispatch.notify(
            review.customer_id, 'Owner Replied',
            'The parking owner replied to your review.',
            type='review', metadata={'reviewId': review.id, 'parkingId': review.parking_spot_id},
        )
        return review
