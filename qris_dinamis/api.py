"""FastAPI application for qris-dinamis."""
from __future__ import annotations

import logging
from dataclasses import asdict

from fastapi import Depends, FastAPI, Header, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from sqlalchemy.ext.asyncio import AsyncSession

from .config import settings
from .converter import FeeOptions
from .crc import verify
from .errors import ServiceError, err_not_found
from .logging_conf import configure_logging
from .merchant import extract_merchant_info, summarize
from .middleware import RequestLoggingMiddleware, route_path_for
from .models import get_session, init_db
from .monitoring import metrics_payload, record_service_error
from .schemas import (
    ConvertRequest,
    ConvertResponse,
    InspectResponse,
    PayloadRequest,
    StaticPayloadResponse,
    ValidateResponse,
)
from .services.conversion import QrisConverter
from .services.storage import SqlPayloadRepository, StaticPayloadRepository
from .validator import is_valid

app = FastAPI(title="qris-dinamis", version="0.1.0")
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["*"],
)

logger = logging.getLogger("qris_dinamis.api")


def _warn_insecure_defaults() -> None:
    if settings.api_key == "dev-secret-key":
        logger.warning(
            "api key menggunakan nilai default",
            extra={"config_key": "api_key", "environment": settings.environment},
        )


@app.on_event("startup")
async def on_startup() -> None:
    configure_logging()
    _warn_insecure_defaults()
    await init_db()


async def require_api_key(x_api_key: str = Header(...)) -> None:
    if x_api_key != settings.api_key:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid API key")


async def get_payload_repository(session: AsyncSession = Depends(get_session)) -> StaticPayloadRepository:
    return SqlPayloadRepository(session)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    route_path = route_path_for(request)
    logger.warning(
        "service error",
        extra={"code": exc.code, "path": route_path, "method": request.method},
    )
    record_service_error(exc.code, route_path)
    return JSONResponse(status_code=exc.status_code, content={"code": exc.code, "message": exc.message})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "unhandled exception",
        extra={"path": route_path_for(request), "method": request.method},
    )
    return JSONResponse(status_code=500, content={"code": "ERR_INTERNAL", "message": "Internal server error"})


@app.get("/health", tags=["system"])
async def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/metrics", tags=["system"])
async def metrics() -> Response:
    payload, content_type = metrics_payload()
    return Response(content=payload, media_type=content_type)


@app.post("/v1/qris/validate", response_model=ValidateResponse, tags=["qris"], dependencies=[Depends(require_api_key)])
async def validate_qris(body: PayloadRequest) -> ValidateResponse:
    return ValidateResponse(
        valid=is_valid(body.payload),
        strict_valid=is_valid(body.payload, strict=True),
        checksum_valid=verify(body.payload.strip()),
    )


@app.post("/v1/qris/inspect", response_model=InspectResponse, tags=["qris"], dependencies=[Depends(require_api_key)])
async def inspect_qris(body: PayloadRequest) -> InspectResponse:
    return InspectResponse(**asdict(summarize(body.payload)))


@app.post("/v1/qris/convert", response_model=ConvertResponse, tags=["qris"], dependencies=[Depends(require_api_key)])
async def convert_qris(
    body: ConvertRequest,
    repository: StaticPayloadRepository = Depends(get_payload_repository),
) -> ConvertResponse:
    fee = FeeOptions(kind=body.fee.kind, value=body.fee.value) if body.fee else None
    result = await QrisConverter(repository).generate(
        amount=body.amount,
        fee=fee,
        payload=body.payload,
        render=body.render,
    )
    return ConvertResponse(
        payload=result.payload,
        crc=result.crc,
        merchant_name=result.merchant.merchant_name,
        city=result.merchant.city,
        qr_png_base64=result.qr_png_base64,
    )


@app.get("/v1/static-payload", response_model=StaticPayloadResponse, tags=["static-payload"], dependencies=[Depends(require_api_key)])
async def get_static_payload(repository: StaticPayloadRepository = Depends(get_payload_repository)) -> StaticPayloadResponse:
    payload = await repository.load()
    if not payload:
        raise err_not_found("No static payload stored")
    info = extract_merchant_info(payload)
    return StaticPayloadResponse(payload=payload, merchant_name=info.merchant_name, city=info.city)


@app.put("/v1/static-payload", response_model=StaticPayloadResponse, tags=["static-payload"], dependencies=[Depends(require_api_key)])
async def put_static_payload(
    body: PayloadRequest,
    repository: StaticPayloadRepository = Depends(get_payload_repository),
) -> StaticPayloadResponse:
    await repository.save(body.payload)
    payload = await repository.load() or body.payload.strip()
    info = extract_merchant_info(payload)
    return StaticPayloadResponse(payload=payload, merchant_name=info.merchant_name, city=info.city)


@app.delete(
    "/v1/static-payload",
    status_code=status.HTTP_204_NO_CONTENT,
    tags=["static-payload"],
    dependencies=[Depends(require_api_key)],
)
async def delete_static_payload(repository: StaticPayloadRepository = Depends(get_payload_repository)) -> Response:
    await repository.clear()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
