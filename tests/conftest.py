"""
Pytest configuration and global fixtures.
"""
import base64
import json
import re
import sys
from io import BytesIO
from pathlib import Path

import httpx
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.models import BoundingBox, TextRegion, User
from data.database import DatabaseManager
from data.db_models import Base
from services.account_service import AccountService
from services.backend_client import BackendClient
from services.ocr_service import OCRService
from services.session_store import SessionStore
from services.workflow_service import WorkflowController

BACKEND_URL = "http://backend.test"

CREDITS_PATH = re.compile(r'^/api/users/([^/]+)/credits$')


class FakeBackend:
    """In-process stand-in for the remote OCR/credit backend."""

    def __init__(self):
        self.calls = []
        self.regions = [
            {'id': 'r1', 'box': {'ymin': 50, 'xmin': 100, 'ymax': 150, 'xmax': 900},
             'order': 1, 'description': 'Title', 'isActive': True},
            {'id': 'r2', 'box': {'ymin': 200, 'xmin': 100, 'ymax': 500, 'xmax': 900},
             'order': 2, 'description': 'Paragraph 1', 'isActive': True},
            {'id': 'r3', 'box': {'ymin': 550, 'xmin': 100, 'ymax': 800, 'xmax': 900},
             'order': 3, 'description': 'Paragraph 2', 'isActive': True},
        ]
        self.extracted_text = "Title\n\nFirst paragraph."
        self.initial_credits = 3
        self.users = {}
        self.failures = {}
        self.errors = {}

    def fail(self, path, status, body=None):
        """Make ``path`` answer with a non-2xx status."""
        self.failures[path] = (status, body)

    def raise_on(self, path, exc):
        """Make ``path`` raise a transport error."""
        self.errors[path] = exc

    def calls_to(self, path):
        return [body for p, body, _ in self.calls if p == path]

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        body = json.loads(request.content) if request.content else None
        self.calls.append((path, body, dict(request.headers)))

        if path in self.errors:
            raise self.errors[path]
        if path in self.failures:
            status, content = self.failures[path]
            if isinstance(content, (dict, list)):
                return httpx.Response(status, json=content)
            return httpx.Response(status, text=content or "")

        if path == '/api/detect-regions':
            return httpx.Response(200, json={'regions': self.regions})
        if path == '/api/extract-text':
            return httpx.Response(200, json={'extractedText': self.extracted_text})
        if path == '/api/users':
            user = {'id': 'user-1', 'email': body['email'],
                    'credits': self.initial_credits, 'isPro': False}
            self.users[user['id']] = user
            return httpx.Response(200, json=user)

        match = CREDITS_PATH.match(path)
        if match and match.group(1) in self.users:
            user = self.users[match.group(1)]
            user['credits'] += body['amount']
            return httpx.Response(200, json=user)
        return httpx.Response(404, json={'detail': 'Not found'})

    @property
    def transport(self):
        return httpx.MockTransport(self.handler)


def make_region(region_id, order, is_active=True, description=""):
    """Build a region with a simple box derived from its order."""
    top = order * 100
    return TextRegion(
        id=region_id,
        box=BoundingBox(ymin=top, xmin=100, ymax=top + 50, xmax=900),
        order=order,
        description=description or f"Paragraph {order}",
        is_active=is_active
    )


@pytest.fixture(scope="session")
def test_db_engine():
    """Create in-memory SQLite engine for tests."""
    engine = create_engine("sqlite:///:memory:", echo=False)
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)


@pytest.fixture
def test_db_session(test_db_engine):
    """Create fresh database session for each test."""
    Session = sessionmaker(bind=test_db_engine)
    session = Session()

    yield session

    # Rollback any uncommitted changes and close
    session.rollback()
    session.close()


@pytest.fixture
def db_manager():
    """Database manager on a private in-memory database."""
    manager = DatabaseManager("sqlite://")
    manager.create_tables()
    yield manager
    manager.dispose()


@pytest.fixture
def temp_dir(tmp_path):
    """Provide temporary directory for test files."""
    return tmp_path


@pytest.fixture
def sample_png_bytes():
    """Provide PNG bytes of a small white image."""
    from PIL import Image

    img = Image.new('RGB', (200, 100), color='white')
    buf = BytesIO()
    img.save(buf, format='PNG')
    return buf.getvalue()


@pytest.fixture
def sample_image_path(temp_dir, sample_png_bytes):
    """Create a sample test image."""
    img_path = temp_dir / "test_image.png"
    img_path.write_bytes(sample_png_bytes)
    return str(img_path)


@pytest.fixture
def sample_base64_image(sample_png_bytes):
    """Provide base64 encoded sample image."""
    return base64.b64encode(sample_png_bytes).decode()


@pytest.fixture
def sample_regions():
    """Scenario regions: a and b active, c inactive."""
    return [
        make_region('a', 1),
        make_region('b', 2),
        make_region('c', 3, is_active=False),
    ]


@pytest.fixture
def sample_user():
    return User(id='user-1', email='reader@example.com', credits=3, is_pro=False)


@pytest.fixture
def fake_backend():
    return FakeBackend()


@pytest.fixture
def backend_client(fake_backend):
    return BackendClient(BACKEND_URL, transport=fake_backend.transport)


@pytest.fixture
def session_store(db_manager):
    return SessionStore(db_manager)


@pytest.fixture
def controller(backend_client, session_store):
    return WorkflowController(
        ocr=OCRService(backend_client),
        accounts=AccountService(backend_client),
        store=session_store
    )


@pytest.fixture
def api_client(fake_backend):
    """TestClient for the full app wired to the fake backend."""
    from fastapi.testclient import TestClient
    from config.settings import Settings
    from serving.app import create_app

    settings = Settings(
        backend_url=BACKEND_URL,
        backend_auth_mode="none",
        database_url="sqlite://",
        log_level="WARNING"
    )
    app = create_app(settings=settings, transport=fake_backend.transport)
    with TestClient(app) as client:
        yield client


@pytest.fixture
def auth_headers(api_client):
    """Log in through the API and return the session header."""
    response = api_client.post("/auth/login", json={"email": "reader@example.com"})
    return {"X-Session-Token": response.json()["token"]}
