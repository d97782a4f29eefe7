from decimal import Decimal
from unittest.mock import Mock, patch

from django.test import TestCase, override_settings
from rest_framework.exceptions import PermissionDenied, ValidationError

from bookings.models import Booking
from ledger.models import Transaction
from payments.models import PlatformSetting
from payments.services import CommissionService, PaymentVerificationService, RazorpayService
from utils.exceptions import (
    AlreadyProcessed, BookingNotPayable, PaymentGatewayUnavailable, SignatureVerificationFailed,
    SpotNoLongerExists
)
from .helpers import BookingFixtureMixin, gateway_settings, make_user


class CommissionSplitTests(TestCase):

    def test_fee_and_earnings_add_up(self):
        fee, earnings = CommissionService.split(Decimal('200.00'), Decimal('15'))

        self.assertEqual(fee, Decimal('30.00'))
        self.assertEqual(earnings, Decimal('170.00'))

    def test_fee_rounds_half_up(self):
        fee, earnings = CommissionService.split(Decimal('0.10'), Decimal('15'))

        # 0.015 rounds to 0.02
        self.assertEqual(fee, Decimal('0.02'))
        self.assertEqual(fee + earnings, Decimal('0.10'))

    @override_settings(DEFAULT_COMMISSION_PERCENT='12.5')
    def test_default_percent_from_configuration(self):
        self.assertEqual(CommissionService.get_commission_percent(), Decimal('12.5'))

    def test_percent_from_platform_setting(self):
        CommissionService.update_commission_percent(Decimal('20'))

        self.assertEqual(CommissionService.get_commission_percent(), Decimal('20.00'))
        self.assertEqual(PlatformSetting.objects.count(), 1)

    def test_negative_percent_rejected(self):
        with self.assertRaises(ValidationError):
            CommissionService.update_commission_percent(Decimal('-1'))


@gateway_settings
class RazorpayServiceTests(TestCase):

    def _booking(self):
        return Mock(id=7, total_amount=Decimal('199.99'), booking_code='SPOT1700000000000ABCDE')

    @patch('payments.services.razorpay.Client')
    def test_order_amount_in_minor_units(self, client_class):
        client_class.return_value.order.create.return_value = {'id': 'order_1', 'amount': 19999, 'currency': 'INR'}

        order = RazorpayService().create_order(self._booking())

        client_class.assert_called_once_with(auth=('rzp_test_key', 'rzp_test_secret'))
        data = client_class.return_value.order.create.call_args.kwargs['data']
        self.assertEqual(data['amount'], 19999)
        self.assertEqual(data['currency'], 'INR')
        self.assertEqual(data['receipt'], 'SPOT1700000000000ABCDE')
        self.assertEqual(order['id'], 'order_1')

    @patch('payments.services.razorpay.Client')
    def test_order_failure_surfaces_as_unavailable(self, client_class):
        client_class.return_value.order.create.side_effect = Exception('502 Bad Gateway')

        with self.assertRaises(PaymentGatewayUnavailable):
            RazorpayService().create_order(self._booking())

    @override_settings(RAZORPAY_KEY_ID='')
    def test_missing_credentials(self):
        with self.assertRaises(PaymentGatewayUnavailable):
            RazorpayService()

    def test_signature_check(self):
        from .helpers import sign

        service = RazorpayService()
        self.assertTrue(service.verify_payment('order_1', 'pay_1', sign('order_1', 'pay_1')))
        self.assertFalse(service.verify_payment('order_1', 'pay_1', sign('order_1', 'pay_1', 'wrong-secret')))
        self.assertFalse(service.verify_payment('order_1', 'pay_2', sign('order_1', 'pay_1')))


@gateway_settings
class PaymentVerificationTests(BookingFixtureMixin, TestCase):

    def setUp(self):
        super().setUp()
        self.booking, _ = self.book()

    def test_confirms_booking_and_credits_owner(self):
        booking, payment = PaymentVerificationService.verify(self.confirmation(self.booking), self.customer)

        self.assertEqual(booking.status, 'confirmed')
        self.assertEqual(booking.payment_status, 'paid')
        self.assertEqual(booking.payment_id, 'pay_TEST123')
        self.assertTrue(booking.invoice_number.startswith('INV-'))
        self.assertEqual(payment, {'amount': 200.0, 'ownerEarnings': 170.0, 'platformFee': 30.0})

        self.owner.refresh_from_db()
        self.assertEqual(self.owner.wallet_balance, Decimal('170.00'))

    def test_ledger_conservation(self):
        PaymentVerificationService.verify(self.confirmation(self.booking), self.customer)

        earning = Transaction.objects.get(booking=self.booking, type='earning')
        fee = Transaction.objects.get(booking=self.booking, type='platform_fee')

        self.assertEqual(earning.amount + abs(fee.amount), self.booking.total_amount)
        self.assertEqual(earning.balance_after - earning.balance_before, earning.amount)
        self.assertEqual(fee.balance_before, fee.balance_after)
        self.assertEqual(earning.user, self.owner)
        self.assertEqual(earning.payment_method, 'razorpay')
        self.assertEqual(earning.razorpay_payment_id, 'pay_TEST123')

    def test_duplicate_verification_is_rejected(self):
        confirmation = self.confirmation(self.booking)
        PaymentVerificationService.verify(confirmation, self.customer)

        with self.assertRaises(AlreadyProcessed):
            PaymentVerificationService.verify(confirmation, self.customer)

        self.owner.refresh_from_db()
        self.assertEqual(self.owner.wallet_balance, Decimal('170.00'))
        self.assertEqual(Transaction.objects.filter(type='earning').count(), 1)

    def test_conditional_update_guards_against_race(self):
        # Another request confirmed the booking between our read and our write
        original_filter = Booking.objects.filter

        def racing_filter(*args, **kwargs):
            if kwargs.get('status') == 'pending' and kwargs.get('payment_status') == 'pending':
                original_filter(pk=self.booking.pk).update(status='confirmed', payment_status='paid')
            return original_filter(*args, **kwargs)

        with patch.object(Booking.objects, 'filter', side_effect=racing_filter):
            with self.assertRaises(AlreadyProcessed):
                PaymentVerificationService.verify(self.confirmation(self.booking), self.customer)

        self.owner.refresh_from_db()
        self.assertEqual(self.owner.wallet_balance, Decimal('0.00'))
        self.assertFalse(Transaction.objects.exists())

    def test_bad_signature_fails_booking_and_releases_slot(self):
        confirmation = self.confirmation(self.booking, signature='0' * 64)

        with self.assertRaises(SignatureVerificationFailed):
            PaymentVerificationService.verify(confirmation, self.customer)

        self.booking.refresh_from_db()
        self.assertEqual(self.booking.status, 'failed')
        self.assertEqual(self.booking.payment_status, 'failed')
        self.assertEqual(self.booking.failure_reason, 'Payment verification failed')
        self.spot.refresh_from_db()
        self.assertEqual(self.spot.available_slots, 1)
        self.owner.refresh_from_db()
        self.assertEqual(self.owner.wallet_balance, Decimal('0.00'))
        self.assertFalse(Transaction.objects.exists())

    def test_failed_booking_is_not_payable(self):
        with self.assertRaises(SignatureVerificationFailed):
            PaymentVerificationService.verify(self.confirmation(self.booking, signature='bad'), self.customer)

        with self.assertRaises(BookingNotPayable):
            PaymentVerificationService.verify(self.confirmation(self.booking), self.customer)

    def test_spot_deleted_before_payment(self):
        self.spot.delete()

        with self.assertRaises(SpotNoLongerExists):
            PaymentVerificationService.verify(self.confirmation(self.booking), self.customer)

        self.booking.refresh_from_db()
        self.assertEqual(self.booking.status, 'failed')
        self.assertEqual(self.booking.failure_reason, 'Parking spot no longer exists')
        self.assertFalse(Transaction.objects.exists())

    def test_only_booking_user_can_verify(self):
        with self.assertRaises(PermissionDenied):
            PaymentVerificationService.verify(self.confirmation(self.booking), make_user('someone'))

    def test_order_must_match(self):
        confirmation = self.confirmation(self.booking)
        confirmation = confirmation.__class__(
            booking_id=confirmation.booking_id,
            payment_id=confirmation.payment_id,
            order_id='order_other',
            signature=confirmation.signature,
        )

        with self.assertRaises(ValidationError):
            PaymentVerificationService.verify(confirmation, self.customer)

    def test_missing_secret(self):
        with override_settings(RAZORPAY_KEY_SECRET=''):
            with self.assertRaises(PaymentGatewayUnavailable):
                PaymentVerificationService.verify(self.confirmation(self.booking), self.customer)

        self.booking.refresh_from_db()
        self.assertEqual(self.booking.status, 'pending')

    def test_commission_percent_can_be_injected(self):
        _, payment = PaymentVerificationService.verify(
            self.confirmation(self.booking), self.customer, commission_percent=Decimal('0')
        )

        self.assertEqual(payment['ownerEarnings'], 200.0)
        self.assertEqual(payment['platformFee'], 0.0)

    def test_commission_over_hundred_rejected(self):
        with self.assertRaises(ValidationError):
            PaymentVerificationService.verify(
                self.confirmation(self.booking), self.customer, commission_percent=Decimal('120')
            )

        self.booking.refresh_from_db()
        self.assertEqual(self.booking.status, 'pending')
        self.assertFalse(Transaction.objects.exists())

    def test_full_commission_leaves_wallet_untouched(self):
        PaymentVerificationService.verify(
            self.confirmation(self.booking), self.customer, commission_percent=Decimal('100')
        )

        self.owner.refresh_from_db()
        self.assertEqual(self.owner.wallet_balance, Decimal('0.00'))
        earning = Transaction.objects.get(type='earning')
        self.assertEqual(earning.amount, Decimal('0.00'))
        self.assertEqual(Transaction.objects.get(type='platform_fee').amount, Decimal('-200.00'))
