"""
Handlers globais: toda resposta de erro sai como JSON com "detail" e fica registrada no log.
"""
import traceback

from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from pixcheckout.utils.logger import logger


def _rota(request: Request) -> str:
    return f"{request.method} {request.url.path}"


def _campos_invalidos(exc: RequestValidationError) -> list:
    campos = [
        {
            "field": ".".join(str(parte) for parte in erro.get("loc", [])),
            "type": erro.get("type", "unknown"),
            "message": erro.get("msg", "Erro de validação"),
            "input": erro.get("input"),
        }
        for erro in exc.errors()
    ]
    # ctx do pydantic pode carregar a própria exceção
    return jsonable_encoder(campos, custom_encoder={Exception: str})


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    campos = _campos_invalidos(exc)
    resumo = ", ".join(f"{c['field']} ({c['type']})" for c in campos)
    logger.warning(f"[Validacao] {_rota(request)} 422: {resumo}")
    if request.query_params:
        logger.warning(f"[Validacao] Query params: {dict(request.query_params)}")

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": campos, "message": "Erro de validação nos dados fornecidos"},
    )


async def http_exception_handler(request: Request, exc):
    nivel = logger.error if exc.status_code >= 500 else logger.warning
    nivel(f"[HTTP {exc.status_code}] {_rota(request)}: {exc.detail}")

    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "status_code": exc.status_code},
        headers=getattr(exc, "headers", None),
    )


async def general_exception_handler(request: Request, exc: Exception):
    logger.error(
        f"[Erro] {_rota(request)} {type(exc).__name__}: {exc}\n{traceback.format_exc()}"
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Erro interno do servidor", "error_type": type(exc).__name__},
    )
