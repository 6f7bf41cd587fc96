"""
Static option lists offered by the form: legal areas, tones and output registers.
"""
from typing import Dict, List

LEGAL_AREAS: List[str] = [
    "Familiar",
    "Civil",
    "Penal",
    "Administrativo",
    "Mercantil",
    "Amparo",
    "Laboral",
    "Tributario",
    "Constitucional",
]

TONES: List[str] = [
    "Formal",
    "Persuasivo",
    "Informativo",
    "Conciliador",
    "Firme y enérgico",
    "Académico",
]

LANGUAGES: List[str] = [
    "Técnico-jurídico",
    "Claro y sencillo (para clientes)",
    "Lenguaje coloquial",
    "Estilo forense",
]

ROLE_TEMPLATE = "Actúa como un abogado especialista en {area}"


def default_role(area: str) -> str:
    return ROLE_TEMPLATE.format(area=area)


def role_matches_any_area_default(role: str) -> bool:
    """
    True when `role` is still the untouched template of some legal area,
    i.e. the user has not written a role of their own.
    """
    return any(role == default_role(area) for area in LEGAL_AREAS)


def options() -> Dict[str, List[str]]:
    return {
        "legal_areas": list(LEGAL_AREAS),
        "tones": list(TONES),
        "languages": list(LANGUAGES),
    }
