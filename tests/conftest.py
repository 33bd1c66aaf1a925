import pytest
from fastapi.testclient import TestClient

from gowheels.core.config import Settings
from gowheels.main import create_app
from gowheels.models.errors import PersistenceError
from tests.fakes import FIXED_NOW, FakeNotifier, FakeRepository


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        ENVIRONMENT="test",
        TIMEZONE="UTC",
        ALLOWED_ORIGINS=["http://localhost:5500"],
        SUPABASE_URL="",
        SUPABASE_KEY="",
        SMTP_USERNAME="mailer@gowheels.test",
        SMTP_PASSWORD="secret",
        EMAIL_TIMEOUT_SECONDS=0.2,
        LOG_DIR=str(tmp_path),
    )


@pytest.fixture
def repository():
    return FakeRepository()


@pytest.fixture
def failing_repository():
    return FakeRepository(error=PersistenceError("connection refused"))


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def client(settings, repository, notifier):
    app = create_app(settings, repository=repository, notifier=notifier, clock=lambda: FIXED_NOW)
    return TestClient(app)
