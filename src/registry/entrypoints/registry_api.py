"""
Registry API Entrypoint - Thin API with Command Dispatch
Local backend for the single-operator capture tool
"""
import logging
import os
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

import config
from geolocation.adapters.location_sensor import LocationSensorError, ReportedPositionSensor
from geolocation.domain.model import GeolocationCapture, LocationMethod, parse_coordinate_text
from geolocation.service_layer.capture import build_capture
from insights.service_layer.summarizer import InsightPanel, ServiceFailure
from registry import views
from registry.adapters.repository import RecordStoreError
from registry.domain.commands import GenerateInsight, RegisterCase
from registry.domain.model import CaseDraft, CaseValidationError
from registry.domain.reference_data import reference_catalogue
from registry.service_layer import messagebus
from registry.service_layer.unit_of_work import AbstractUnitOfWork, KeyValueUnitOfWork

log_level = os.getenv('LOG_LEVEL', 'INFO').upper()
logging.basicConfig(
    level=getattr(logging, log_level, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="GeoChild Registry API",
    description="Children-with-disability case capture - Maputo pilot",
    version="1.0.0"
)


def get_uow() -> AbstractUnitOfWork:
    return KeyValueUnitOfWork()


insight_panel = InsightPanel()


def get_insight_panel() -> InsightPanel:
    return insight_panel


@app.exception_handler(RecordStoreError)
async def record_store_error_handler(request: Request, exc: RecordStoreError):
    logger.error(f"Record store failure on {request.url.path}: {exc}")
    return JSONResponse(status_code=503, content={"detail": "Record store unavailable"})


# ---------- Request/Response models ----------

class LocationRequest(BaseModel):
    method: LocationMethod = LocationMethod.SENSOR
    # numbers for gps/map, free text as typed for manual
    latitude: Optional[Union[float, str]] = None
    longitude: Optional[Union[float, str]] = None
    sensor_error: Optional[str] = None


class CaseDraftRequest(BaseModel):
    child_name: str = ""
    id_type: str = ""
    id_number: str = ""
    caregiver_name: str = ""
    caregiver_relation: str = ""
    caregiver_phone: str = ""
    gender: str = ""
    dob: str = ""                 # YYYY-MM-DD
    district: str = ""
    diagnosis: str = ""
    custom_diagnosis: str = ""
    is_clinically_confirmed: bool = False
    # raw values; validate() rejects booleans, strings and floats
    scores: Dict[str, Any] = {}
    location: LocationRequest = LocationRequest()

    model_config = {
        "json_schema_extra": {
            "example": {
                "child_name": "Ana Macuácua",
                "id_type": "Assento de Nascimento",
                "id_number": "123456",
                "caregiver_name": "Rosa Macuácua",
                "caregiver_relation": "Mãe",
                "caregiver_phone": "+258840000000",
                "gender": "F",
                "dob": "2018-05-14",
                "district": "KaMavota",
                "diagnosis": "Paralisia Cerebral",
                "scores": {
                    "vision": 1, "hearing": 1, "mobility": 3, "communication": 2,
                    "learning": 2, "behavior": 1, "selfcare": 3
                },
                "location": {"method": "map", "latitude": -25.9301, "longitude": 32.6045}
            }
        }
    }


class InsightResponse(BaseModel):
    text: str
    record_count: int
    generated_at: str


def _number_or_none(value) -> Optional[float]:
    if value is None:
        return None
    return parse_coordinate_text(str(value))


def draft_from_request(request: CaseDraftRequest) -> CaseDraft:
    """Merge the location block into the draft via geolocation capture."""
    location = request.location

    if location.method == LocationMethod.MANUAL:
        capture = build_capture(location.method, location.latitude, location.longitude)
    elif location.method == LocationMethod.MAP:
        capture = build_capture(
            location.method,
            _number_or_none(location.latitude),
            _number_or_none(location.longitude),
        )
    elif location.sensor_error is None and (location.latitude is None or location.longitude is None):
        # no fix was taken on the device
        capture = GeolocationCapture()
    else:
        sensor = ReportedPositionSensor(
            latitude=_number_or_none(location.latitude),
            longitude=_number_or_none(location.longitude),
            error=location.sensor_error,
        )
        capture = build_capture(location.method, sensor=sensor)

    draft = CaseDraft(
        child_name=request.child_name,
        id_type=request.id_type,
        id_number=request.id_number,
        caregiver_name=request.caregiver_name,
        caregiver_relation=request.caregiver_relation,
        caregiver_phone=request.caregiver_phone,
        gender=request.gender,
        dob=request.dob,
        district=request.district,
        diagnosis_choice=request.diagnosis,
        custom_diagnosis=request.custom_diagnosis,
        is_clinically_confirmed=request.is_clinically_confirmed,
        scores=dict(request.scores),
    )
    return draft.with_location(capture)


# ---------- Endpoints ----------

@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": "geochild-registry-api",
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


@app.get("/api/v1/reference-data", summary="Enumerations for the capture form")
def get_reference_data():
    return reference_catalogue()


@app.post("/api/v1/records", status_code=201, summary="Register a new case")
def create_record(draft_request: CaseDraftRequest, uow: AbstractUnitOfWork = Depends(get_uow)):
    """
    Validate and register a case.

    Validation and device-location failures return 422 with the error kind,
    leaving nothing stored.
    """
    try:
        draft = draft_from_request(draft_request)
        record = messagebus.handle(RegisterCase(draft=draft), uow)[0]
        return record.to_dict()

    except (CaseValidationError, LocationSensorError) as e:
        raise HTTPException(
            status_code=422,
            detail={"kind": e.kind, "field": getattr(e, "field", None), "message": str(e)},
        )
    except RecordStoreError as e:
        logger.error(f"Could not store record: {e}")
        raise HTTPException(status_code=503, detail="Record store unavailable")
    except Exception as e:
        logger.error(f"Error creating record: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@app.get("/api/v1/records", summary="All records in capture order")
def get_records(uow: AbstractUnitOfWork = Depends(get_uow)):
    records = views.list_records(uow)
    return {"records": [r.to_dict() for r in records], "total_count": len(records)}


@app.get("/api/v1/records/{record_id}", summary="Get record by id")
def get_record_by_id(record_id: str, uow: AbstractUnitOfWork = Depends(get_uow)):
    record = views.get_record(record_id, uow)
    if record is None:
        raise HTTPException(status_code=404, detail=f"Record {record_id} not found")
    return record.to_dict()


@app.get("/api/v1/dashboard", summary="Pilot dashboard figures")
def get_dashboard(uow: AbstractUnitOfWork = Depends(get_uow)):
    return views.get_dashboard(uow)


@app.get("/api/v1/map", summary="Map view defaults and case markers")
def get_map(uow: AbstractUnitOfWork = Depends(get_uow)):
    map_config = config.get_map_config()
    markers = views.get_markers(uow)
    return {
        "center": {"lat": map_config["center"][0], "lng": map_config["center"][1]},
        "zoom": map_config["zoom"],
        "tile_url": map_config["tile_url"],
        "markers": [marker.to_dict() for marker in markers],
    }


@app.post("/api/v1/insights", response_model=InsightResponse, summary="AI analysis of the registry")
def create_insight(
    uow: AbstractUnitOfWork = Depends(get_uow),
    panel: InsightPanel = Depends(get_insight_panel),
):
    """
    Run the analysis and show it on the panel.

    A response that arrives after the operator left the panel, or after a
    newer request started, is dropped and answered with 409.
    """
    token = panel.begin()
    try:
        text = messagebus.handle(GenerateInsight(), uow)[0]
    except ServiceFailure as e:
        panel.fail(token)
        raise HTTPException(status_code=502, detail={"kind": e.kind, "message": str(e)})
    except RecordStoreError:
        panel.fail(token)
        raise

    if not panel.resolve(token, text):
        raise HTTPException(
            status_code=409,
            detail={"kind": "Superseded", "message": "The analysis panel was left before the response arrived"},
        )

    return InsightResponse(
        text=text,
        record_count=len(views.list_records(uow)),
        generated_at=datetime.now(timezone.utc).isoformat(),
    )


@app.get("/api/v1/insights", summary="Current state of the analysis panel")
def get_insight_panel_state(panel: InsightPanel = Depends(get_insight_panel)):
    board = panel.board
    return {"pending": board.pending, "report": board.report, "error": board.error}


@app.delete("/api/v1/insights", status_code=204, summary="Leave the analysis panel")
def leave_insight_panel(panel: InsightPanel = Depends(get_insight_panel)):
    panel.leave()
