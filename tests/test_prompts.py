"""
Tests for the option catalog and the prompt builder
"""
from catalog import LEGAL_AREAS, default_role, options, role_matches_any_area_default
from prompts import (
    JURISDICTION_INSTRUCTIONS,
    build_improve_instruction,
    build_prompt,
    strip_jurisdiction,
)
from workflow import FormData


def _form(**overrides):
    values = dict(role="R", task="T", context="C", tone="Formal", language="Estilo forense")
    values.update(overrides)
    return FormData(**values)


def test_build_prompt_layout():
    prompt = build_prompt(_form())
    assert prompt == (
        JURISDICTION_INSTRUCTIONS
        + "\n\nRol=R\nTarea=T\nContexto=C\nTono=Formal\nLenguaje=Estilo forense"
    )


def test_build_prompt_is_deterministic():
    form = _form(task="Redactar demanda", context="Arrendamiento vencido")
    assert build_prompt(form) == build_prompt(form)
    assert build_prompt(form).startswith(JURISDICTION_INSTRUCTIONS)


def test_build_prompt_inserts_fields_verbatim():
    form = _form(task="Usar {llaves} y = signos\nen dos líneas", context="  con espacios  ")
    prompt = build_prompt(form)
    assert "Tarea=Usar {llaves} y = signos\nen dos líneas\n" in prompt
    assert "Contexto=  con espacios  \n" in prompt


def test_strip_jurisdiction_keeps_only_user_block():
    prompt = build_prompt(_form())
    assert strip_jurisdiction(prompt) == "Rol=R\nTarea=T\nContexto=C\nTono=Formal\nLenguaje=Estilo forense"


def test_improve_instruction_wraps_user_block_in_markers():
    instruction = build_improve_instruction(build_prompt(_form()))
    assert JURISDICTION_INSTRUCTIONS not in instruction
    assert "---\nRol=R\nTarea=T\nContexto=C\nTono=Formal\nLenguaje=Estilo forense\n---" in instruction
    assert instruction.endswith("PROMPT MEJORADO:")


def test_default_role_detection():
    assert role_matches_any_area_default(default_role("Penal"))
    assert all(role_matches_any_area_default(default_role(a)) for a in LEGAL_AREAS)
    assert not role_matches_any_area_default("Actúa como notario")
    assert not role_matches_any_area_default(default_role("Penal") + " ")


def test_options_lists_catalog():
    opts = options()
    assert opts["legal_areas"][0] == "Familiar"
    assert "Formal" in opts["tones"]
    assert "Técnico-jurídico" in opts["languages"]
