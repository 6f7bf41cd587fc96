"""
Prompt templates and the prompt builder used by the backend.
"""
from typing import Any

JURISDICTION_INSTRUCTIONS = (
    "IMPORTANTE: Todas las respuestas deben estar estrictamente basadas en el marco legal vigente "
    "en toda la República Mexicana, tomando como base primordial la Constitución Política de los "
    "Estados Unidos Mexicanos. Si se requiere jurisprudencia, debe ser citada exclusivamente del "
    "Semanario Judicial de la Federación."
)

USER_PROMPT_TEMPLATE = """Rol={role}
Tarea={task}
Contexto={context}
Tono={tone}
Lenguaje={language}"""

IMPROVE_PROMPT_TEMPLATE = """Revisa y mejora el siguiente prompt para un asistente legal de IA para maximizar la claridad, detalle y efectividad, considerando el marco legal mexicano.
Asegúrate de que la estructura sea lógica y que pida la información más relevante.
Devuelve únicamente el prompt mejorado, sin añadir explicaciones, preámbulos o texto introductorio, y manteniendo el formato original de "Rol=... Tarea=...".

PROMPT ORIGINAL:
---
{user_prompt}
---
PROMPT MEJORADO:"""


def with_jurisdiction(user_prompt: str) -> str:
    return f"{JURISDICTION_INSTRUCTIONS}\n\n{user_prompt}"


def build_prompt(form: Any) -> str:
    """
    Assemble the final prompt from the form fields.

    Pure and deterministic. Field values are inserted verbatim; callers only
    invoke this once `task` and `context` are both filled in.
    """
    user_prompt = USER_PROMPT_TEMPLATE.format(
        role=form.role,
        task=form.task,
        context=form.context,
        tone=form.tone,
        language=form.language,
    ).strip()
    return with_jurisdiction(user_prompt)


def strip_jurisdiction(prompt: str) -> str:
    """Return only the user-authored Key=Value block of a built prompt."""
    return prompt.replace(JURISDICTION_INSTRUCTIONS, "", 1).strip()


def build_improve_instruction(prompt: str) -> str:
    return IMPROVE_PROMPT_TEMPLATE.format(user_prompt=strip_jurisdiction(prompt))
