"""FastAPI router exposing the donation point directory."""

from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, Response

from aggregation import compute_needs_ranking, compute_statistics
from points import DonationPointService

__all__ = ["build_points_router"]

LOGGER = logging.getLogger(__name__)


def build_points_router(service: DonationPointService) -> APIRouter:
    """Return an :class:`APIRouter` serving ``/api/pontos``.

    The aggregate routes are declared before the parametrised CRUD routes so
    ``/necessidades`` and ``/estatisticas`` are never captured as ids.
    """

    router = APIRouter(prefix="/api/pontos", tags=["pontos"])

    @router.get("/necessidades")
    def list_needs() -> JSONResponse:
        try:
            points = service.list_all()
        except Exception as exc:
            return _error(500, "Erro ao listar necessidades", exc)
        ranking = compute_needs_ranking(points)
        return JSONResponse([entry.as_dict() for entry in ranking])

    @router.get("/estatisticas")
    def statistics() -> JSONResponse:
        try:
            points = service.list_all()
        except Exception as exc:
            return _error(500, "Erro ao calcular estatísticas", exc)
        return JSONResponse(compute_statistics(points).as_dict())

    @router.get("")
    def list_points() -> JSONResponse:
        try:
            points = service.list_all()
        except Exception as exc:
            return _error(500, "Erro ao listar pontos de doação", exc)
        return JSONResponse([point.as_dict() for point in points])

    @router.get("/id/{point_id}")
    def get_point(point_id: int) -> JSONResponse:
        try:
            point = service.get(point_id)
        except Exception as exc:
            return _error(500, "Erro ao buscar ponto", exc)
        if point is None:
            return JSONResponse({"erro": "Ponto de doação não encontrado"}, status_code=404)
        return JSONResponse(point.as_dict())

    @router.get("/cidade/{nome}")
    def list_points_by_city(nome: str) -> JSONResponse:
        try:
            points = service.list_by_city(nome)
        except Exception as exc:
            return _error(500, "Erro ao buscar pontos por cidade", exc)
        return JSONResponse([point.as_dict() for point in points])

    @router.post("")
    async def create_point(request: Request) -> JSONResponse:
        try:
            point = service.create(await _read_body(request))
        except Exception as exc:
            return _error(400, "Erro ao criar ponto", exc)
        return JSONResponse(point.as_dict(), status_code=201)

    @router.put("/{point_id}")
    async def update_point(point_id: int, request: Request) -> JSONResponse:
        try:
            point = service.update(point_id, await _read_body(request))
        except Exception as exc:
            return _error(400, "Erro ao atualizar ponto", exc)
        if point is None:
            return JSONResponse({"erro": "Ponto não encontrado"}, status_code=404)
        return JSONResponse(point.as_dict())

    @router.delete("/{point_id}")
    def delete_point(point_id: int) -> Response:
        try:
            service.delete(point_id)
        except Exception as exc:
            return _error(400, "Erro ao remover ponto", exc)
        return Response(status_code=204)

    return router


async def _read_body(request: Request) -> Any:
    # Decoding errors surface as ValueError so they share the 400 path.
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ValueError(f"Corpo da requisição não é um JSON válido: {exc}") from exc


def _error(status_code: int, message: str, exc: Exception) -> JSONResponse:
    if isinstance(exc, ValueError):
        LOGGER.warning("%s: %s", message, exc)
    else:
        LOGGER.exception(message)
    return JSONResponse({"erro": message, "detalhe": str(exc)}, status_code=status_code)
