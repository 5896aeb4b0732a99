# app/services/user_service.py

from datetime import datetime

from app.core.result import ErrorKind, Result
from app.entities.user import AuthenticatedPrincipal
from app.infrastructure.database.models.role_model import RoleModel
from app.infrastructure.database.models.user_model import UserModel
from app.infrastructure.security.password_hasher import PasswordHasher
from app.repositories.role_repository import RoleRepository
from app.repositories.user_repository import UserRepository

BAD_CREDENTIALS_MESSAGE = "Bad credentials"
ROLE_NOT_FOUND_MESSAGE = "Error: Role is not found."


def to_principal(user: UserModel) -> AuthenticatedPrincipal:
    return AuthenticatedPrincipal(
        id=user.id,
        username=user.username,
        email=user.email,
        roles=tuple(user.role_names),
    )


class UserService:
    """Credential store: usuários, papéis e verificação de senha."""

    def __init__(self, user_repository: UserRepository, role_repository: RoleRepository) -> None:
        self._user_repository = user_repository
        self._role_repository = role_repository

    def authenticate(self, *, username: str, password: str) -> Result[AuthenticatedPrincipal]:
        user = self._user_repository.get_by_username(username.strip())
        if user is None:
            return Result.failure(ErrorKind.BAD_CREDENTIALS, BAD_CREDENTIALS_MESSAGE)

        ok = PasswordHasher.verify_password(
            password,
            password_hash=user.password_hash,
            password_salt=user.password_salt,
            iterations=user.password_iterations,
            algo=user.password_algo,
        )
        if not ok:
            return Result.failure(ErrorKind.BAD_CREDENTIALS, BAD_CREDENTIALS_MESSAGE)

        return Result.success(to_principal(user))

    def load_principal(self, username: str) -> AuthenticatedPrincipal | None:
        user = self._user_repository.get_by_username(username)
        if user is None:
            return None
        return to_principal(user)

    def exists_by_username(self, username: str) -> bool:
        return self._user_repository.exists_by_username(username.strip())

    def exists_by_email(self, email: str) -> bool:
        return self._user_repository.exists_by_email(email.strip().lower())

    def find_role_by_name(self, name: str) -> Result[RoleModel]:
        role = self._role_repository.get_by_name(name)
        if role is None:
            return Result.failure(ErrorKind.ROLE_NOT_FOUND, ROLE_NOT_FOUND_MESSAGE)
        return Result.success(role)

    def create_user(
        self,
        *,
        username: str,
        email: str,
        password: str,
        roles: list[RoleModel],
        now: datetime,
    ) -> UserModel:
        digest = PasswordHasher.hash_password(password)

        model = UserModel(
            username=username.strip(),
            email=email.strip().lower(),
            password_algo=digest.algo,
            password_iterations=digest.iterations,
            password_hash=digest.password_hash,
            password_salt=digest.password_salt,
            created_at=now,
            roles=roles,
        )
        return self._user_repository.add(model)
