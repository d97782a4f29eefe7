# ==================== UTILS/EXCEPTIONS.PY ====================
import logging

from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class InvalidTimeRange(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'End time must be after start time.'
    default_code = 'invalid_time_range'


class InvalidDuration(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Invalid booking duration.'
    default_code = 'invalid_duration'


class SpotUnavailable(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'This parking spot is currently unavailable for booking.'
    default_code = 'spot_unavailable'


class SlotUnavailable(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Slot no longer available.'
    default_code = 'slot_unavailable'


class PaymentGatewayUnavailable(APIException):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = 'Payment system is currently unavailable.'
    default_code = 'payment_gateway_unavailable'


class SignatureVerificationFailed(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Payment verification failed.'
    default_code = 'signature_verification_failed'


class SpotNoLongerExists(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Parking spot no longer available.'
    default_code = 'spot_no_longer_exists'


class AlreadyProcessed(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Payment already processed.'
    default_code = 'already_processed'


class BookingNotPayable(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Booking is no longer awaiting payment.'
    default_code = 'booking_not_payable'


class AlreadyCancelled(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Booking already cancelled.'
    default_code = 'already_cancelled'


class CannotCancelCompleted(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Cannot cancel completed booking.'
    default_code = 'cannot_cancel_completed'


class InvalidBookingState(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Booking cannot change state from its current status.'
    default_code = 'invalid_booking_state'


class InsufficientBalance(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Insufficient wallet balance.'
    default_code = 'insufficient_balance'


class LedgerIntegrityError(APIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'Wallet ledger is inconsistent; the operation was rolled back.'
    default_code = 'ledger_integrity_error'


def _first_message(detail):
    """Flatten DRF error details into a single human readable message"""
    if isinstance(detail, dict):
        for field, value in detail.items():
            message = _first_message(value)
            if field in ('non_field_errors', 'detail'):
                return message
            return f"{field}: {message}"
        return ''
    if isinstance(detail, (list, tuple)):
        return _first_message(detail[0]) if detail else ''
    return str(detail)


def api_exception_handler(exc, context):
    """Render every API error as {"success": false, "message": "..."}"""
    response = exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, ValidationError):
        message = _first_message(exc.detail)
    else:
        message = _first_message(response.data)

    if response.status_code >= 500:
        logger.error(f"API error {response.status_code} in {context.get('view').__class__.__name__}: {message}")

    response.data = {'success': False, 'message': message}
    return response
