# Importing the package registers every table on Base.metadata
from tripnest.models.user import Role, User
from tripnest.models.hotel import Hotel
from tripnest.models.item import Item, item_hotels
from tripnest.models.reservation import PartyType, Reservation, ReservationStatus

__all__ = [
    "Role",
    "User",
    "Hotel",
    "Item",
    "item_hotels",
    "PartyType",
    "Reservation",
    "ReservationStatus",
]
