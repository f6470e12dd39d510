from travelmart.models.user import Driver, Role, Staff, User
from travelmart.models.vehicle import CarBooking, Damage, Vehicle
from travelmart.models.cart import CartItem
from travelmart.models.payment import Payment, PaymentBooking, PaymentMethod
from travelmart.models.booking import (
    AirportTransfer,
    BaggageBooking,
    BaggagePrice,
    HandlingBooking,
)
from travelmart.models.notification import Notification

__all__ = [
    "AirportTransfer",
    "BaggageBooking",
    "BaggagePrice",
    "CarBooking",
    "CartItem",
    "Damage",
    "Driver",
    "HandlingBooking",
    "Notification",
    "Payment",
    "PaymentBooking",
    "PaymentMethod",
    "Role",
    "Staff",
    "User",
    "Vehicle",
]
