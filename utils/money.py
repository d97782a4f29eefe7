from decimal import Decimal, ROUND_HALF_UP

TWO_PLACES = Decimal('0.01')


def round2(value):
    """Quantize to 2 decimal places, half up"""
    return Decimal(str(value)).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def to_minor_units(amount):
    """Major currency units to the gateway's integer minor units (paise)"""
    return int(round2(amount) * 100)


def as_float(amount):
    return float(round2(amount))
