import datetime
import pytest
import pytest_asyncio
from unittest.mock import AsyncMock, MagicMock
import fastapi.testclient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
import hoaxify.config
import hoaxify.database
import hoaxify.main
import hoaxify.models
import hoaxify.services.storage
import hoaxify.services.token_service
import hoaxify.utils

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00\x00\x00\rIHDR" + b"\x00" * 64
JPEG_BYTES = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00" + b"\x00" * 64
TEXT_BYTES = b"just some plain text, nothing to sniff here"


@pytest.fixture(autouse=True)
def fast_hashing(monkeypatch):
    monkeypatch.setattr(hoaxify.config.settings, "bcrypt_rounds", 4)


@pytest.fixture
def upload_dirs(tmp_path, monkeypatch):
    monkeypatch.setattr(hoaxify.config.settings, "upload_dir", str(tmp_path / "upload"))
    hoaxify.services.storage.create_folders()
    return {
        "profile": hoaxify.services.storage.profile_folder(),
        "attachment": hoaxify.services.storage.attachment_folder(),
    }


@pytest.fixture
def mock_session():
    return AsyncMock(spec=AsyncSession)


@pytest.fixture
def mock_user():
    user = MagicMock()
    user.id = 1
    user.username = "user1"
    user.email = "user1@mail.com"
    user.password_hash = "$2b$04$fakehash"
    user.inactive = False
    user.activation_token = None
    user.password_reset_token = None
    user.image = None
    return user


@pytest.fixture
def mock_token():
    token = MagicMock()
    token.token = "a" * 32
    token.user_id = 1
    token.last_used_at = hoaxify.utils.utcnow() - datetime.timedelta(hours=1)
    return token


@pytest.fixture
def mock_attachment():
    attachment = MagicMock()
    attachment.id = 7
    attachment.filename = "b" * 32 + ".png"
    attachment.file_type = "image/png"
    attachment.upload_date = datetime.datetime(2026, 1, 1, 12, 0, 0)
    attachment.hoax_id = None
    return attachment


def make_execute_result(value=None, rowcount=None):
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    result.scalar_one.return_value = value
    result.scalars.return_value.all.return_value = value if isinstance(value, list) else []
    result.rowcount = rowcount
    return result


@pytest_asyncio.fixture
async def session_factory():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False}
    )
    async with engine.begin() as conn:
        await conn.run_sync(hoaxify.models.Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def client(mock_session):
    async def override_get_db():
        yield mock_session

    hoaxify.main.app.dependency_overrides[hoaxify.database.get_db] = override_get_db
    yield fastapi.testclient.TestClient(hoaxify.main.app)
    hoaxify.main.app.dependency_overrides.clear()


@pytest.fixture
def authenticated_as(mocker):
    def _authenticate(user_id: int = 1):
        return mocker.patch.object(
            hoaxify.services.token_service, "authenticate", mocker.AsyncMock(return_value=user_id)
        )
    return _authenticate


AUTH_HEADER = {"Authorization": "Bearer " + "a" * 32}
