# app/api/middlewares/filter_chain.py
"""
Cadeia de filtros explícita executada antes de cada rota.

Cada estágio recebe o ``RequestContext`` e a função ``call_next`` que aciona
o restante da cadeia. Um estágio pode:

- retornar ``call_next(ctx)`` para seguir adiante;
- retornar uma ``Response`` para encerrar a requisição ali;
- lançar uma exceção, que sobe até o estágio anterior que a trate.

O último ``call_next`` retorna ``None``, e o Flask segue para a rota.
A ordem é exatamente a da lista passada ao ``FilterChain``.
"""
from typing import Callable, Sequence

from flask import Flask, Response, g, request

from app.core.clock import utc_now
from app.entities.request_context import RequestContext

NextStage = Callable[[RequestContext], Response | None]
Stage = Callable[[RequestContext, NextStage], Response | None]


def _end_of_chain(ctx: RequestContext) -> Response | None:
    return None


class FilterChain:
    def __init__(self, stages: Sequence[Stage]) -> None:
        self._stages = tuple(stages)

    def handle(self, ctx: RequestContext) -> Response | None:
        call: NextStage = _end_of_chain
        # monta de trás para frente: stages[0] envolve todos os demais
        for stage in reversed(self._stages):
            call = _bind(stage, call)
        return call(ctx)


def _bind(stage: Stage, call_next: NextStage) -> NextStage:
    def run(ctx: RequestContext) -> Response | None:
        return stage(ctx, call_next)

    return run


def build_request_context() -> RequestContext:
    return RequestContext(
        path=request.path,
        method=request.method,
        headers=request.headers,
        received_at=utc_now(),
    )


def current_request_context() -> RequestContext:
    ctx = g.get("request_context")
    if ctx is None:
        # rota fora da cadeia (ex.: erro de roteamento antes do before_request)
        ctx = build_request_context()
        g.request_context = ctx
    return ctx


def install_filter_chain(app: Flask, chain: FilterChain) -> None:
    @app.before_request
    def _run_filter_chain():
        ctx = build_request_context()
        g.request_context = ctx
        return chain.handle(ctx)
