# app/api/middlewares/request_logging.py
import logging

from flask import Flask, g

from app.core.clock import utc_now

logger = logging.getLogger("app.request")


def register_request_logging(app: Flask) -> None:
    @app.after_request
    def _log_request(response):
        ctx = g.get("request_context")
        if ctx is None:
            return response

        latency_ms = int((utc_now() - ctx.received_at).total_seconds() * 1000)
        user_id = ctx.principal.id if ctx.principal is not None else None
        logger.info(
            "method=%s path=%s status=%s latency_ms=%s user_id=%s",
            ctx.method,
            ctx.path,
            response.status_code,
            latency_ms,
            user_id,
        )
        return response
