from enum import Enum


class BookingStatus(str, Enum):

    pending = "pending"
    confirmed = "confirmed"
    canceled = "canceled"
