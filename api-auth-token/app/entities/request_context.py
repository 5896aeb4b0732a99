# app/entities/request_context.py
from dataclasses import dataclass
from datetime import datetime
from typing import Mapping

from app.core.result import AuthError
from app.entities.user import AuthenticatedPrincipal


@dataclass
class RequestContext:
    """
    Estado de segurança de uma única requisição.

    Criado pelo primeiro estágio da cadeia de filtros e repassado
    explicitamente aos estágios seguintes e às rotas; nunca é compartilhado
    entre requisições.
    """

    path: str
    method: str
    headers: Mapping[str, str]
    received_at: datetime
    principal: AuthenticatedPrincipal | None = None
    auth_failure: AuthError | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.principal is not None
