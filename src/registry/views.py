"""
Views for read operations - separate from the capture/write path.
Map markers and dashboard figures are computed from the stored records.
"""
import html
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from registry.domain.model import CaseRecord
from registry.domain.severity import Severity
from registry.service_layer.unit_of_work import AbstractUnitOfWork

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MapMarker:
    lat: float
    lng: float
    label: str
    severity: str

    def to_dict(self) -> Dict[str, Any]:
        return {"lat": self.lat, "lng": self.lng, "label": self.label, "severity": self.severity}


def marker_label(record: CaseRecord) -> str:
    """Pop-up text: bold child name, then diagnosis and severity."""
    return (
        f"<b>{html.escape(record.child_name)}</b>"
        f"<br>{html.escape(record.diagnosis)}"
        f"<br>{html.escape(record.severity)}"
    )


def to_markers(records: Sequence[CaseRecord]) -> List[MapMarker]:
    """One marker per record, at the record's stored coordinates."""
    return [
        MapMarker(lat=record.lat, lng=record.lng, label=marker_label(record), severity=record.severity)
        for record in records
    ]


def records_newest_first(records: Sequence[CaseRecord], limit: Optional[int] = None) -> List[CaseRecord]:
    newest = list(reversed(records))
    if limit is not None:
        newest = newest[:limit]
    return newest


def dashboard_summary(records: Sequence[CaseRecord], recent_limit: int = 10) -> Dict[str, Any]:
    """
    Figures shown on the pilot dashboard.

    Returns:
        - total: number of registered cases
        - high_severity: cases classified High
        - by_district: case count per district
        - recent: most recent cases first (id, name, diagnosis, district, severity)
    """
    by_district = {}  # type: Dict[str, int]
    for record in records:
        by_district[record.district] = by_district.get(record.district, 0) + 1

    return {
        "total": len(records),
        "high_severity": sum(1 for r in records if r.severity == Severity.HIGH.value),
        "by_district": by_district,
        "recent": [
            {
                "id": r.id,
                "child_name": r.child_name,
                "diagnosis": r.diagnosis,
                "district": r.district,
                "severity": r.severity,
            }
            for r in records_newest_first(records, recent_limit)
        ],
        "queried_at": datetime.now(timezone.utc).isoformat(),
    }


def list_records(uow: AbstractUnitOfWork) -> List[CaseRecord]:
    with uow:
        return uow.records.list()


def get_record(record_id: str, uow: AbstractUnitOfWork) -> Optional[CaseRecord]:
    with uow:
        return uow.records.get(record_id)


def get_markers(uow: AbstractUnitOfWork) -> List[MapMarker]:
    records = list_records(uow)
    logger.info(f"Projecting {len(records)} records to map markers")
    return to_markers(records)


def get_dashboard(uow: AbstractUnitOfWork) -> Dict[str, Any]:
    return dashboard_summary(list_records(uow))
