"""
FastAPI server — equipment, sensor logs, risk, alerts, dashboard, live alert socket.

POST /api/v1/equipment/{id}/logs is the inbound trigger: the body is validated
here, stored, and handed to the alert pipeline. Everything else is read-only
over the database. HIGH/CRITICAL assessments are relayed on WebSocket /ws/alerts.
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager, suppress
from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Query, Request, WebSocket, WebSocketDisconnect
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response

from backend_equipment import __version__
from backend_equipment.alerts.notifier import get_broadcaster
from backend_equipment.alerts.pipeline import AlertPipeline, build_default_pipeline
from backend_equipment.api_server.schemas import (
    AlertResponse,
    DashboardStatsResponse,
    EquipmentRequest,
    EquipmentResponse,
    RiskResponse,
    SensorLogCreatedResponse,
    SensorLogRequest,
    SensorLogResponse,
)
from backend_equipment.config import get_settings
from backend_equipment.core.exceptions import AlertPersistenceError, ResourceNotFoundError
from backend_equipment.database import init_db
from backend_equipment.equipment_logging import get_logger
from backend_equipment.services import AlertService, EquipmentService, SensorLogService

logger = get_logger(__name__)

# -----------------------------------------------------------------------------
# Dependencies (app-scoped pipeline so per-equipment locks are shared)
# -----------------------------------------------------------------------------

_pipeline: AlertPipeline | None = None


def get_pipeline() -> AlertPipeline:
    global _pipeline
    if _pipeline is None:
        _pipeline = build_default_pipeline()
    return _pipeline


def reset_pipeline_for_test() -> None:
    global _pipeline
    _pipeline = None


def get_equipment_service() -> EquipmentService:
    return EquipmentService()


def get_sensor_log_service(pipeline: AlertPipeline = Depends(get_pipeline)) -> SensorLogService:
    return SensorLogService(pipeline)


def get_alert_service() -> AlertService:
    return AlertService()


# -----------------------------------------------------------------------------
# Lifespan: create tables on startup
# -----------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables and wire the pipeline before serving."""
    init_db()
    pipeline = get_pipeline()
    logger.info(
        "api_started",
        weight_temperature=pipeline.weights.temperature,
        weight_vibration=pipeline.weights.vibration,
        weight_load=pipeline.weights.load,
    )
    yield
    logger.info("api_stopped")


# -----------------------------------------------------------------------------
# App and routes
# -----------------------------------------------------------------------------

app = FastAPI(
    title="Backend Equipment API",
    description="Sensor ingestion, risk scoring, and debounced alerts for industrial equipment.",
    version=__version__,
    lifespan=lifespan,
)

router = APIRouter(prefix="/api/v1")


@router.get("/equipment", response_model=list[EquipmentResponse])
def list_equipment(service: EquipmentService = Depends(get_equipment_service)) -> list[EquipmentResponse]:
    return [EquipmentResponse.from_record(r) for r in service.list_equipment()]


@router.get("/equipment/search", response_model=list[EquipmentResponse])
def search_equipment(
    name: str = Query(..., min_length=1),
    service: EquipmentService = Depends(get_equipment_service),
) -> list[EquipmentResponse]:
    return [EquipmentResponse.from_record(r) for r in service.search_by_name(name)]


@router.get("/equipment/{equipment_id}", response_model=EquipmentResponse)
def get_equipment(
    equipment_id: int,
    service: EquipmentService = Depends(get_equipment_service),
) -> EquipmentResponse:
    return EquipmentResponse.from_record(service.get_equipment(equipment_id))


@router.post("/equipment", response_model=EquipmentResponse, status_code=201)
def create_equipment(
    body: EquipmentRequest,
    service: EquipmentService = Depends(get_equipment_service),
) -> EquipmentResponse:
    record = service.create_equipment(
        body.name,
        body.type,
        location=body.location,
        install_date=body.install_date,
        notes=body.notes,
    )
    return EquipmentResponse.from_record(record)


@router.put("/equipment/{equipment_id}", response_model=EquipmentResponse)
def update_equipment(
    equipment_id: int,
    body: EquipmentRequest,
    service: EquipmentService = Depends(get_equipment_service),
) -> EquipmentResponse:
    record = service.update_equipment(
        equipment_id,
        body.name,
        body.type,
        location=body.location,
        install_date=body.install_date,
        notes=body.notes,
    )
    return EquipmentResponse.from_record(record)


@router.delete("/equipment/{equipment_id}", status_code=204)
def delete_equipment(
    equipment_id: int,
    service: EquipmentService = Depends(get_equipment_service),
) -> Response:
    service.delete_equipment(equipment_id)
    return Response(status_code=204)


@router.post("/equipment/{equipment_id}/logs", response_model=SensorLogCreatedResponse, status_code=201)
def add_sensor_log(
    equipment_id: int,
    body: SensorLogRequest,
    service: SensorLogService = Depends(get_sensor_log_service),
) -> SensorLogCreatedResponse:
    """Store a validated reading and score it; returns the log and its risk assessment."""
    saved, assessment = service.add_sensor_log(
        equipment_id,
        body.temperature,
        body.vibration,
        body.load_percentage,
        timestamp=body.timestamp,
    )
    log = SensorLogResponse.from_record(saved)
    return SensorLogCreatedResponse(
        **log.model_dump(),
        risk=RiskResponse.from_assessment(assessment),
        alert_recorded=assessment.alert_recorded,
    )


@router.get("/equipment/{equipment_id}/logs", response_model=list[SensorLogResponse])
def get_sensor_logs(
    equipment_id: int,
    since: datetime | None = Query(None, alias="from"),
    until: datetime | None = Query(None, alias="to"),
    limit: int = Query(100, ge=1, le=1000),
    order: str = Query("desc", pattern="^(asc|desc|ASC|DESC)$"),
    service: SensorLogService = Depends(get_sensor_log_service),
) -> list[SensorLogResponse]:
    if since is not None and until is not None:
        records = service.get_sensor_logs_between(equipment_id, since, until, limit=limit)
    else:
        records = service.get_sensor_logs(equipment_id, limit=limit, order=order)
    return [SensorLogResponse.from_record(r) for r in records]


@router.get("/equipment/{equipment_id}/logs/latest", response_model=SensorLogResponse)
def get_latest_sensor_log(
    equipment_id: int,
    service: SensorLogService = Depends(get_sensor_log_service),
) -> SensorLogResponse:
    return SensorLogResponse.from_record(service.get_latest_sensor_log(equipment_id))


@router.get("/equipment/{equipment_id}/risk/latest", response_model=RiskResponse)
def get_latest_risk(
    equipment_id: int,
    service: AlertService = Depends(get_alert_service),
) -> RiskResponse:
    return RiskResponse(**service.get_latest_risk(equipment_id))


@router.get("/equipment/{equipment_id}/risk/history", response_model=list[RiskResponse])
def get_risk_history(
    equipment_id: int,
    limit: int = Query(100, ge=1, le=1000),
    service: AlertService = Depends(get_alert_service),
) -> list[RiskResponse]:
    return [RiskResponse(**r) for r in service.get_risk_history(equipment_id, limit)]


@router.get("/alerts", response_model=list[AlertResponse])
def get_alerts(
    level: str | None = Query(None),
    limit: int = Query(50, ge=1, le=1000),
    service: AlertService = Depends(get_alert_service),
) -> list[AlertResponse]:
    try:
        alerts = service.get_alerts(level, limit)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Unknown risk level: {level}") from e
    return [AlertResponse(**a) for a in alerts]


@router.get("/dashboard/stats", response_model=DashboardStatsResponse)
def get_dashboard_stats(service: AlertService = Depends(get_alert_service)) -> DashboardStatsResponse:
    return DashboardStatsResponse(**service.get_dashboard_stats())


app.include_router(router)


@app.get("/health")
def health() -> dict[str, str]:
    """Liveness check: API is up."""
    return {"status": "ok"}


# -----------------------------------------------------------------------------
# Live alerts: relay broadcaster messages to WebSocket clients
# -----------------------------------------------------------------------------


@app.websocket("/ws/alerts")
async def alerts_socket(websocket: WebSocket) -> None:
    """Push every HIGH/CRITICAL assessment published on the alert topic as JSON."""
    loop = asyncio.get_running_loop()
    wake = asyncio.Event()

    def _notify() -> None:
        if not loop.is_closed():
            loop.call_soon_threadsafe(wake.set)

    async def _relay() -> None:
        while True:
            await wake.wait()
            wake.clear()
            for payload in subscription.drain():
                await websocket.send_json(payload)

    # Subscribe before accept so nothing published after the handshake is missed
    broadcaster = get_broadcaster()
    subscription = broadcaster.subscribe(get_settings().alert_topic, on_message=_notify)
    relay: asyncio.Task | None = None
    try:
        await websocket.accept()
        logger.info("alert_socket_connected", subscribers=broadcaster.subscriber_count(subscription.topic))
        relay = asyncio.create_task(_relay())
        while True:
            # Client messages are ignored; receive raises on disconnect.
            receiver = asyncio.ensure_future(websocket.receive_text())
            done, _ = await asyncio.wait({receiver, relay}, return_when=asyncio.FIRST_COMPLETED)
            if receiver in done:
                receiver.result()
                continue
            # Relay stopped (send failed): stop serving this socket
            receiver.cancel()
            with suppress(asyncio.CancelledError):
                await receiver
            break
    except WebSocketDisconnect:
        pass
    finally:
        if relay is not None:
            relay.cancel()
            with suppress(asyncio.CancelledError):
                try:
                    await relay
                except Exception as e:
                    logger.warning("alert_socket_relay_failed", error=str(e))
        broadcaster.unsubscribe(subscription)
        logger.info("alert_socket_disconnected", dropped=subscription.dropped)


# -----------------------------------------------------------------------------
# Error handlers
# -----------------------------------------------------------------------------


def _error(status_code: int, error: str, message: str, request: Request) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "timestamp": datetime.now().isoformat(),
            "status": status_code,
            "error": error,
            "detail": message,
            "path": request.url.path,
        },
    )


@app.exception_handler(ResourceNotFoundError)
def not_found_handler(request: Request, exc: ResourceNotFoundError) -> JSONResponse:
    logger.warning("resource_not_found", detail=exc.message, path=request.url.path)
    return _error(404, "Not Found", exc.message, request)


@app.exception_handler(RequestValidationError)
def validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = ", ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()) if p != 'body')}: {err.get('msg')}"
        for err in exc.errors()
    )
    logger.warning("request_validation_failed", detail=message, path=request.url.path)
    return _error(400, "Validation Error", message, request)


@app.exception_handler(AlertPersistenceError)
def persistence_handler(request: Request, exc: AlertPersistenceError) -> JSONResponse:
    logger.error("alert_persistence_failed", detail=exc.message, path=request.url.path)
    return _error(503, "Service Unavailable", "Alert history is unavailable; reading not processed", request)


@app.exception_handler(HTTPException)
def http_exception_handler(request: Any, exc: HTTPException) -> JSONResponse:
    """Consistent JSON error response for HTTPException."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
    )
