from __future__ import annotations

import logging
from datetime import datetime
from functools import lru_cache
from typing import Callable

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from ...api import (
    AvailabilityResponse,
    CopilotChatRequest,
    CopilotChatResponse,
    DayAvailabilityPayload,
    QuotaResponse,
)
from ...domain import EmbeddingGenerationFailed, QuotaExceeded
from ..calendar import CalendarService
from ..context import ServiceContext
from ..copilot import CopilotService
from ..quota import QuotaGovernor

logger = logging.getLogger(__name__)

app = FastAPI(title="Sales Copilot API", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@lru_cache(maxsize=1)
def get_service_context() -> ServiceContext:
    return ServiceContext()


def get_copilot_service() -> CopilotService:
    return get_service_context().copilot


def get_quota_governor() -> QuotaGovernor:
    return get_service_context().governor


def get_calendar_service() -> CalendarService:
    return get_service_context().calendar


def get_clock() -> Callable[[], datetime]:
    return get_service_context().now


@app.post("/api/copilot/chat", response_model=CopilotChatResponse)
async def copilot_chat(
    request: CopilotChatRequest,
    service: CopilotService = Depends(get_copilot_service),
) -> CopilotChatResponse:
    try:
        reply = await service.respond(request.to_domain())
    except QuotaExceeded as exc:
        logger.info("Copilot request denied: %s", exc)
        raise HTTPException(
            status_code=403,
            detail={"code": exc.code, "message": "Monthly credit limit reached for this company."},
        ) from exc
    except EmbeddingGenerationFailed as exc:
        logger.warning("Copilot request aborted: %s", exc)
        raise HTTPException(status_code=502, detail={"code": exc.code, "message": str(exc)}) from exc
    except Exception as exc:  # noqa: BLE001
        logger.exception("Copilot request failed for tenant %s", request.tenant_id)
        raise HTTPException(status_code=500, detail={"code": "internal_error", "message": str(exc)}) from exc
    return CopilotChatResponse.from_domain(reply)


@app.get("/api/copilot/quota/{tenant_id}", response_model=QuotaResponse)
def quota_status(
    tenant_id: str,
    governor: QuotaGovernor = Depends(get_quota_governor),
    clock: Callable[[], datetime] = Depends(get_clock),
) -> QuotaResponse:
    decision = governor.check(tenant_id, clock())
    return QuotaResponse.from_domain(tenant_id, decision)


@app.get("/api/copilot/availability/{user_id}", response_model=AvailabilityResponse)
def calendar_availability(
    user_id: str,
    calendar: CalendarService = Depends(get_calendar_service),
) -> AvailabilityResponse:
    try:
        report = calendar.availability(user_id)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Availability lookup failed for user %s", user_id)
        raise HTTPException(status_code=502, detail={"code": "calendar_unavailable", "message": str(exc)}) from exc
    if report is None:
        return AvailabilityResponse(user_id=user_id, connected=False)
    return AvailabilityResponse(
        user_id=user_id,
        connected=True,
        days=[DayAvailabilityPayload.from_domain(entry) for entry in report],
    )


def run_local_server(host: str = "127.0.0.1", port: int = 8000) -> None:
    import asyncio

    from hypercorn.asyncio import serve
    from hypercorn.config import Config

    config = Config()
    config.bind = [f"{host}:{port}"]
    logger.info("Serving sales copilot API on %s:%d", host, port)
    asyncio.run(serve(app, config))
