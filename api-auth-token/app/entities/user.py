# app/entities/user.py
from dataclasses import dataclass, field


@dataclass(frozen=True)
class AuthenticatedPrincipal:
    id: int
    username: str
    email: str
    roles: tuple[str, ...] = field(default_factory=tuple)

    def has_any_role(self, *names: str) -> bool:
        return any(name in self.roles for name in names)
