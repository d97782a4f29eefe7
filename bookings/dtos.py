"""Typed inputs handed from the API layer to the booking and payment services"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class BookingRequest:
    parking_spot_id: int
    requester_id: int
    start_time: datetime
    end_time: datetime
    car_id: Optional[int] = None
    special_requests: str = ''


@dataclass(frozen=True)
class PaymentConfirmation:
    booking_id: int
    payment_id: str
    order_id: str
    signature: str
