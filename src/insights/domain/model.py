"""
Insight domain model: the privacy-reduced projection sent for analysis and
the tracker that keeps late responses away from a panel the operator left.
"""
from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, List, Optional, Tuple


INSTRUCTIONS = "Especialista em SIG e Saúde UN."
CONTENT_PREFIX = "Analise estes dados de Maputo em Português: "

GENERIC_FAILURE_MESSAGE = "Não foi possível gerar a análise. Tente novamente."


def project_record(record) -> Dict[str, Any]:
    """Diagnosis, severity and coordinates only; no names or contacts."""
    return {
        "diagnosis": record.diagnosis,
        "severity": record.severity,
        "lat": record.lat,
        "lng": record.lng,
    }


def project_records(records: Iterable) -> List[Dict[str, Any]]:
    return [project_record(record) for record in records]


@dataclass(frozen=True)
class InsightBoard:
    """State of the analysis panel"""
    generation: int = 0
    pending: bool = False
    report: Optional[str] = None
    error: Optional[str] = None

    def begin(self) -> Tuple["InsightBoard", int]:
        board = replace(self, generation=self.generation + 1, pending=True, error=None)
        return board, board.generation

    def leave(self) -> "InsightBoard":
        """Operator navigated away; any outstanding response is now stale."""
        return replace(self, generation=self.generation + 1, pending=False)

    def resolve(self, token: int, text: str) -> "InsightBoard":
        if not self._accepts(token):
            return self
        return replace(self, pending=False, report=text, error=None)

    def fail(self, token: int, message: str = GENERIC_FAILURE_MESSAGE) -> "InsightBoard":
        if not self._accepts(token):
            return self
        return replace(self, pending=False, error=message)

    def _accepts(self, token: int) -> bool:
        return self.pending and token == self.generation
