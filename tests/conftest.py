"""
Pytest configuration and fixtures
"""
import sys
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

# Make the flat project modules importable without installation
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from gemini_service import GeminiGateway
from workflow import Attachment


def make_client(text=None, side_effect=None):
    """Stand-in for genai.Client exposing only aio.models.generate_content."""
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock(
        return_value=SimpleNamespace(text=text),
        side_effect=side_effect,
    )
    return client


@pytest.fixture
def client_factory():
    return make_client


@pytest.fixture
def gateway_factory():
    def _make(text=None, side_effect=None):
        client = make_client(text=text, side_effect=side_effect)
        return GeminiGateway(client=client, model_name="gemini-test"), client
    return _make


@pytest.fixture
def mixed_attachments():
    return [
        Attachment(name="escrito.png", mime_type="image/png", data=b"\x89PNG-1"),
        Attachment(name="contrato.pdf", mime_type="application/pdf", data=b"%PDF-1.7"),
        Attachment(name="foto.jpg", mime_type="image/jpeg", data=b"\xff\xd8JPEG"),
    ]
