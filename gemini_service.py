"""
gemini_service.py - Gemini helpers for the legal prompt workflow.

Exports:
- init_client(api_key: Optional[str])
- build_execute_contents(prompt: str, attachments)
- GeminiGateway.improve_prompt(prompt: str)
- GeminiGateway.get_ai_response(prompt: str, attachments)
- PromptImproveError / AIExecutionError
"""

import logging
import os
from typing import Any, List, Optional, Sequence

from google import genai
from google.genai import types

from prompts import build_improve_instruction, with_jurisdiction

logger = logging.getLogger(__name__)

DEFAULT_MODEL_NAME = "gemini-2.5-flash"

IMPROVE_ERROR_MESSAGE = "No se pudo mejorar el prompt. Por favor, inténtelo de nuevo."
EXECUTE_ERROR_MESSAGE = (
    "No se pudo obtener una respuesta del servicio de IA. "
    "Por favor, inténtelo de nuevo más tarde."
)


class GatewayError(Exception):
    """Base for failures the user can retry. `message` is shown as-is."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class PromptImproveError(GatewayError):
    pass


class AIExecutionError(GatewayError):
    pass


def init_client(api_key: Optional[str] = None) -> genai.Client:
    """
    Create the Gen AI client from an explicit key or the API_KEY env var.
    Raises RuntimeError when no key is configured.
    """
    api_key = api_key or os.environ.get("API_KEY")
    if not api_key:
        raise RuntimeError("API_KEY not configured (set env var or add it to .env).")
    return genai.Client(api_key=api_key)


def is_image(attachment: Any) -> bool:
    return attachment.mime_type.startswith("image/")


def file_to_part(attachment: Any) -> types.Part:
    # The SDK base64-encodes the bytes into inlineData on the wire.
    return types.Part.from_bytes(data=attachment.data, mime_type=attachment.mime_type)


def build_execute_contents(prompt: str, attachments: Sequence[Any]) -> List[types.Part]:
    """
    Prompt text first, then one inline part per image attachment in upload order.
    Non-image attachments are left out of the request.
    """
    parts = [types.Part.from_text(text=prompt)]
    for attachment in attachments:
        if is_image(attachment):
            parts.append(file_to_part(attachment))
    return parts


class GeminiGateway:
    """
    Thin async wrapper around `client.aio.models.generate_content`.
    The client is created on first use unless one is passed in.
    """

    def __init__(self, client: Optional[Any] = None, model_name: Optional[str] = None):
        self._client = client
        self.model_name = model_name or os.environ.get("GEMINI_MODEL", DEFAULT_MODEL_NAME)

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = init_client()
        return self._client

    async def _generate(self, contents: Any) -> Optional[str]:
        response = await self.client.aio.models.generate_content(
            model=self.model_name,
            contents=contents,
        )
        return getattr(response, "text", None)

    async def improve_prompt(self, prompt: str) -> str:
        """
        Send only the Key=Value block to the model and re-prepend the
        jurisdiction preamble to whatever comes back.
        """
        instruction = build_improve_instruction(prompt)
        try:
            improved = await self._generate(instruction)
            if not improved or not improved.strip():
                raise ValueError("model returned an empty improved prompt")
        except Exception as e:
            logger.exception("Error improving the prompt with model %s", self.model_name)
            raise PromptImproveError(IMPROVE_ERROR_MESSAGE) from e
        return with_jurisdiction(improved.strip())

    async def get_ai_response(self, prompt: str, attachments: Sequence[Any] = ()) -> str:
        try:
            contents = build_execute_contents(prompt, attachments)
            text = await self._generate(contents)
            if not text:
                raise ValueError("model returned an empty response")
        except Exception as e:
            logger.exception("Error generating the AI response with model %s", self.model_name)
            raise AIExecutionError(EXECUTE_ERROR_MESSAGE) from e
        return text
