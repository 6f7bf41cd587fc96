"""
workflow.py - state owner for one prompt/response editing session.

The controller holds the form, the derived prompt, the attachment list,
the AI response and the busy/error/edit flags. Every change goes through
one of its transition methods:

- update_form / select_area      : edit the form, re-derive the prompt
- add_attachments / remove_attachment
- improve                        : ask the model to rewrite the prompt
- execute                        : run the prompt (plus image attachments)
- toggle_edit / edit_response    : switch between rendered and editable response
- prompt_export / response_export: read-only download snapshots

improve and execute are coroutines. Only one of them may be in flight at a
time; a second call while busy returns False without touching any state.
An in-flight call is never cancelled.
"""
import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from pydantic import BaseModel, field_validator

from catalog import LANGUAGES, LEGAL_AREAS, TONES, default_role, role_matches_any_area_default
from gemini_service import AIExecutionError, PromptImproveError, is_image
from prompts import build_prompt

logger = logging.getLogger(__name__)

PROMPT_FILENAME = "prompt-juridico.txt"
RESPONSE_FILENAME = "respuesta-ia.md"

EDITABLE_FIELDS = ("role", "task", "context", "tone", "language")


class FormData(BaseModel):
    area_of_law: str = LEGAL_AREAS[0]
    role: str = default_role(LEGAL_AREAS[0])
    task: str = ""
    context: str = ""
    tone: str = TONES[0]
    language: str = LANGUAGES[0]

    @field_validator("area_of_law")
    @classmethod
    def _known_area(cls, v: str) -> str:
        if v not in LEGAL_AREAS:
            raise ValueError(f"Unknown legal area: {v!r}")
        return v

    @field_validator("tone")
    @classmethod
    def _known_tone(cls, v: str) -> str:
        if v not in TONES:
            raise ValueError(f"Unknown tone: {v!r}")
        return v

    @field_validator("language")
    @classmethod
    def _known_language(cls, v: str) -> str:
        if v not in LANGUAGES:
            raise ValueError(f"Unknown language register: {v!r}")
        return v

    def is_complete(self) -> bool:
        return bool(self.task) and bool(self.context)


class Attachment(BaseModel):
    name: str
    mime_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


class WorkflowState(BaseModel):
    is_improving: bool = False
    is_executing: bool = False
    is_response_editable: bool = False
    error: Optional[str] = None


class FileExport(BaseModel):
    filename: str
    media_type: str
    content: str


class Phase(str, Enum):
    IDLE = "idle"
    READY = "ready"
    IMPROVING = "improving"
    EXECUTING = "executing"
    DISPLAYED = "displayed"
    EDITING = "editing"


class WorkflowController:
    def __init__(self, gateway: Any, form: Optional[FormData] = None):
        self._gateway = gateway
        self._form = form or FormData()
        self._attachments: List[Attachment] = []
        self._prompt = ""
        self._response = ""
        self._state = WorkflowState()
        self._recompute_prompt()

    # --- read-only views ---

    @property
    def form(self) -> FormData:
        return self._form.model_copy()

    @property
    def prompt(self) -> str:
        return self._prompt

    @property
    def response(self) -> str:
        return self._response

    @property
    def attachments(self) -> List[Attachment]:
        return list(self._attachments)

    @property
    def state(self) -> WorkflowState:
        return self._state.model_copy()

    @property
    def is_busy(self) -> bool:
        return self._state.is_improving or self._state.is_executing

    @property
    def phase(self) -> Phase:
        if self._state.is_improving:
            return Phase.IMPROVING
        if self._state.is_executing:
            return Phase.EXECUTING
        if self._response:
            return Phase.EDITING if self._state.is_response_editable else Phase.DISPLAYED
        if self._prompt:
            return Phase.READY
        return Phase.IDLE

    def snapshot(self) -> Dict[str, Any]:
        return {
            "form": self._form.model_dump(),
            "prompt": self._prompt,
            "attachments": [
                {
                    "name": a.name,
                    "mime_type": a.mime_type,
                    "size": a.size,
                    "sent_to_model": is_image(a),
                }
                for a in self._attachments
            ],
            "response": self._response,
            "is_improving": self._state.is_improving,
            "is_executing": self._state.is_executing,
            "is_response_editable": self._state.is_response_editable,
            "error": self._state.error,
            "phase": self.phase.value,
        }

    # --- form ---

    def _recompute_prompt(self) -> None:
        self._prompt = build_prompt(self._form) if self._form.is_complete() else ""

    def _replace_form(self, **changes: Any) -> None:
        # Re-run validation; model_copy(update=...) would skip it.
        self._form = FormData(**{**self._form.model_dump(), **changes})
        self._recompute_prompt()

    def update_form(self, **fields: Any) -> None:
        unknown = set(fields) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValueError(f"Not editable form fields: {sorted(unknown)}")
        self._replace_form(**fields)

    def select_area(self, area: str) -> None:
        """
        Switch the legal area. The role follows the new area only while the
        user has not written one of their own (blank or still a template).
        """
        if area not in LEGAL_AREAS:
            raise ValueError(f"Unknown legal area: {area!r}")
        role = self._form.role
        if role_matches_any_area_default(role) or role.strip() == "":
            role = default_role(area)
        self._replace_form(area_of_law=area, role=role)

    # --- attachments ---

    def add_attachments(self, attachments: Sequence[Attachment]) -> None:
        self._attachments.extend(attachments)

    def remove_attachment(self, index: int) -> Attachment:
        if index < 0 or index >= len(self._attachments):
            raise IndexError(f"No attachment at index {index}")
        return self._attachments.pop(index)

    # --- gateway calls ---

    def _can_start(self, action: str) -> bool:
        if not self._prompt:
            logger.info("Ignoring %s: prompt is empty", action)
            return False
        if self.is_busy:
            logger.info("Ignoring %s: another request is in flight", action)
            return False
        return True

    async def improve(self) -> bool:
        if not self._can_start("improve"):
            return False
        self._state.is_improving = True
        self._state.error = None
        logger.debug("improve started")
        try:
            improved = await self._gateway.improve_prompt(self._prompt)
        except PromptImproveError as e:
            self._state.error = e.message
        else:
            self._prompt = improved
        finally:
            self._state.is_improving = False
        logger.debug("improve finished (error=%s)", self._state.error)
        return True

    async def execute(self) -> bool:
        if not self._can_start("execute"):
            return False
        prompt = self._prompt
        attachments = list(self._attachments)
        self._state.is_executing = True
        self._state.error = None
        self._state.is_response_editable = False
        self._response = ""
        logger.debug("execute started with %d attachment(s)", len(attachments))
        try:
            self._response = await self._gateway.get_ai_response(prompt, attachments)
        except AIExecutionError as e:
            self._state.error = e.message
        finally:
            self._state.is_executing = False
        logger.debug("execute finished (error=%s)", self._state.error)
        return True

    # --- response editing ---

    def toggle_edit(self) -> bool:
        self._state.is_response_editable = not self._state.is_response_editable
        return self._state.is_response_editable

    def edit_response(self, text: str) -> bool:
        if not self._state.is_response_editable:
            return False
        self._response = text
        return True

    # --- downloads ---

    def prompt_export(self) -> Optional[FileExport]:
        if not self._prompt:
            return None
        return FileExport(filename=PROMPT_FILENAME, media_type="text/plain", content=self._prompt)

    def response_export(self) -> Optional[FileExport]:
        if not self._response:
            return None
        return FileExport(filename=RESPONSE_FILENAME, media_type="text/markdown", content=self._response)
