"""
Reference data for the Maputo pilot capture form.
Values are stored verbatim in records, so they must not be re-worded.
"""
from dataclasses import dataclass
from typing import Dict, Any, Tuple


DISTRICTS = (
    "KaMpfumo",
    "Nlhamankulu",
    "KaMaxaquene",
    "KaMavota",
    "KaMubukwana",
    "KaTembe",
    "KaNyaka",
)

ID_TYPES = (
    "Assento de Nascimento",
    "Cédula Pessoal",
    "Bilhete de Identidade (BI)",
    "CARTÃO DE ESTRANGEIRO (DIRE)",
    "NUIT",
    "Não Possui / Em Processo",
)

RELATIONS = (
    "Mãe",
    "Pai",
    "Avô / Avó",
    "Tio / Tia",
    "Tutor Legal",
    "Outro Familiar",
)

GENDERS = {
    "M": "Masculino",
    "F": "Feminino",
}

# Selecting this entry means the operator types the condition instead
OTHER_DIAGNOSIS = "Outros"

COMMON_DIAGNOSES = (
    "Paralisia Cerebral",
    "Transtorno do Espectro Autista (Autismo)",
    "Síndrome de Down",
    "Hidrocefalia",
    "Microcefalia",
    "Espina Bífida",
    "Epilepsia",
    "Deficiência Auditiva",
    "Deficiência Visual",
    "Sequelas de Meningite",
    "Sequelas de Malária Cerebral",
    "Atraso Global do Desenvolvimento",
    "Malformações Congénitas",
    OTHER_DIAGNOSIS,
)


@dataclass(frozen=True)
class AssessmentDomain:
    """One functional-difficulty question of the Child Functioning Module."""
    id: str
    label: str


ASSESSMENT_DOMAINS: Tuple[AssessmentDomain, ...] = (
    AssessmentDomain("vision", "Visão (Dificuldade em enxergar)"),
    AssessmentDomain("hearing", "Audição (Dificuldade em ouvir)"),
    AssessmentDomain("mobility", "Mobilidade (Andar ou subir degraus)"),
    AssessmentDomain("communication", "Comunicação (Ser compreendido)"),
    AssessmentDomain("learning", "Aprendizagem (Aprender coisas novas)"),
    AssessmentDomain("behavior", "Comportamento (Controlar emoções)"),
    AssessmentDomain("selfcare", "Autocuidado (Vestir-se ou comer)"),
)

DOMAIN_IDS = tuple(domain.id for domain in ASSESSMENT_DOMAINS)

SEVERITY_LEVELS = {
    1: "Sem dificuldade",
    2: "Alguma dificuldade",
    3: "Muita dificuldade",
    4: "Não consegue realizar",
}

MIN_SCORE = min(SEVERITY_LEVELS)
MAX_SCORE = max(SEVERITY_LEVELS)


def reference_catalogue() -> Dict[str, Any]:
    """All enumerations in a JSON-friendly shape for rendering the form."""
    return {
        "districts": list(DISTRICTS),
        "id_types": list(ID_TYPES),
        "relations": list(RELATIONS),
        "genders": [{"code": code, "label": label} for code, label in GENDERS.items()],
        "diagnoses": list(COMMON_DIAGNOSES),
        "other_diagnosis": OTHER_DIAGNOSIS,
        "assessment_domains": [
            {"id": domain.id, "label": domain.label} for domain in ASSESSMENT_DOMAINS
        ],
        "severity_levels": [
            {"level": level, "label": label} for level, label in SEVERITY_LEVELS.items()
        ],
    }
