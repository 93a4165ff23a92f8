from .destinations import Destination
from .packages import Package
from .booking_contacts import BookingContact
from .bookings import Booking
