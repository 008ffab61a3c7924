import base64
import os

import httpx
import pytest
import pytest_asyncio

from plantsafe.core.config import get_settings

os.environ.setdefault("ENVIRONMENT", "test")

# Smallest valid JPEG header + trailer; enough bytes to look like a real upload.
JPEG_BYTES = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00\xff\xd9"
JPEG_B64 = base64.b64encode(JPEG_BYTES).decode("ascii")

ROSA_REPLY = (
    'Sure! {"plantName":"Rosa rubiginosa","isDangerous":false,"dangerLevel":"Safe",'
    '"toxicParts":[],"symptoms":[],"safetyTips":["None needed"],"generalInfo":"A wild rose.",'
    '"habitat":"Temperate hedgerows","uses":"Ornamental","confidence":"92%"}'
)

ROSA_REPORT = {
    "plantName": "Rosa rubiginosa",
    "isDangerous": False,
    "dangerLevel": "Safe",
    "toxicParts": [],
    "symptoms": [],
    "safetyTips": ["None needed"],
    "generalInfo": "A wild rose.",
    "habitat": "Temperate hedgerows",
    "uses": "Ornamental",
    "confidence": "92%",
}

FALLBACK_FIELDS = {
    "plantName": "Unknown Plant",
    "isDangerous": False,
    "dangerLevel": "Unknown",
    "toxicParts": [],
    "symptoms": [],
    "safetyTips": ["Unable to determine safety - consult a botanist if needed"],
    "habitat": "Unknown",
    "uses": "Unknown",
    "confidence": "Low",
}


@pytest.fixture(autouse=True)
def _reset_settings_cache():
    # Tests mutate env vars; never leak a cached Settings instance across tests.
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def jpeg_b64() -> str:
    return JPEG_B64


@pytest_asyncio.fixture
async def client():
    """In-process ASGI client backed by the mock provider."""
    from plantsafe.core.dependencies import get_identification_service
    from plantsafe.main import app
    from plantsafe.services.ai.common.providers.mock import MockProvider
    from plantsafe.services.ai.identification.service import IdentificationService

    app.dependency_overrides[get_identification_service] = lambda: IdentificationService(MockProvider(ROSA_REPLY))
    transport = httpx.ASGITransport(app=app)
    try:
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
            yield c
    finally:
        app.dependency_overrides.pop(get_identification_service, None)
