from shared.core.logger import AppLogger
from shared.crud.users_crud import UsersRepository

from .services.authservices import AuthService
from .services.userservices import UsersService

# Assembled once at import; routers reach them through Depends providers
users_service = UsersService(UsersRepository(), AppLogger("users"))
auth_service = AuthService(users_service, AppLogger("auth"))


def get_users_service() -> UsersService:
    return users_service


def get_auth_service() -> AuthService:
    return auth_service
