# app/core/logging.py
"""
Configuração de logging da aplicação (stdlib ``logging``).
"""
import logging


def setup_logging(level: str = "INFO") -> None:
    resolved = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=resolved,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    for name in ("werkzeug", "sqlalchemy.engine"):
        logging.getLogger(name).setLevel(max(resolved, logging.WARNING))
