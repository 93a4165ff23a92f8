from shared.core.logger import AppLogger
from shared.utils.image_host import get_image_host

from .crud.booking_contacts_crud import BookingContactsRepository
from .crud.bookings_crud import BookingsRepository
from .crud.destinations_crud import DestinationsRepository
from .crud.packages_crud import PackagesRepository
from .services.booking_contacts_services import BookingContactsService
from .services.bookings_services import BookingsService
from .services.destinations_services import DestinationsService
from .services.packages_services import PackagesService

# Assembled once at import; routers reach them through Depends providers
image_host = get_image_host()
destinations_repository = DestinationsRepository()

packages_service = PackagesService(
    PackagesRepository(), destinations_repository, image_host, AppLogger("packages"))
destinations_service = DestinationsService(
    destinations_repository, packages_service, image_host, AppLogger("destinations"))
bookings_service = BookingsService(
    BookingsRepository(),
    BookingContactsService(BookingContactsRepository()),
    packages_service,
    AppLogger("bookings"),
)


def get_packages_service() -> PackagesService:
    return packages_service


def get_destinations_service() -> DestinationsService:
    return destinations_service


def get_bookings_service() -> BookingsService:
    return bookings_service
