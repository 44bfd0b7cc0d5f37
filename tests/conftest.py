"""
Shared fixtures for docstore tests.

- In-memory SQLite engine and session (tables created per test)
- A fake aioboto3 session that keeps S3 objects in a dict
- Factories for Settings and DocumentService bound to a given backend
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import pytest
import pytest_asyncio
from botocore.exceptions import ClientError

from docstore.core.config import Settings
from docstore.core.db import build_engine, build_session_factory, init_db
from docstore.domains.documents.services import DocumentService
from docstore.infrastructure.object_store import ObjectStoreClient


def pytest_configure(config):
    for name, desc in [
        ("storage", "Storage backends, resolver and object store client"),
        ("documents", "Document service and repository tests"),
        ("api", "HTTP endpoint tests"),
    ]:
        config.addinivalue_line("markers", f"{name}: {desc}")


# =============================================================================
# FAKE S3
# =============================================================================


def client_error(code: str, operation: str, message: str = "boom") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": message}}, operation)


class FakeBody:
    def __init__(self, data: bytes):
        self._data = data

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    async def read(self) -> bytes:
        return self._data


class FakeS3Client:
    """Subset of the aiobotocore S3 client used by ObjectStoreClient"""

    def __init__(self, session: "FakeS3Session"):
        self._session = session

    def _maybe_fail(self, operation: str) -> None:
        error = self._session.failures.get(operation)
        if error is not None:
            raise error

    async def put_object(self, Bucket: str, Key: str, Body: bytes, ContentType: Optional[str] = None):
        self._maybe_fail("put_object")
        self._session.objects[(Bucket, Key)] = bytes(Body)
        self._session.content_types[(Bucket, Key)] = ContentType
        return {"ETag": '"etag"'}

    async def get_object(self, Bucket: str, Key: str):
        self._maybe_fail("get_object")
        if (Bucket, Key) not in self._session.objects:
            raise client_error("NoSuchKey", "GetObject", "The specified key does not exist.")
        if self._session.empty_bodies:
            return {"Body": None}
        return {"Body": FakeBody(self._session.objects[(Bucket, Key)])}

    async def delete_object(self, Bucket: str, Key: str):
        self._maybe_fail("delete_object")
        self._session.objects.pop((Bucket, Key), None)
        return {}


class _ClientContext:
    def __init__(self, client: FakeS3Client):
        self._client = client

    async def __aenter__(self):
        return self._client

    async def __aexit__(self, *exc):
        return False


class FakeS3Session:
    """Stands in for aioboto3.Session; records client kwargs and stored objects"""

    def __init__(self):
        self.objects: Dict[tuple, bytes] = {}
        self.content_types: Dict[tuple, Optional[str]] = {}
        self.failures: Dict[str, Exception] = {}
        self.empty_bodies = False
        self.client_kwargs: Dict[str, Any] = {}

    def client(self, service_name: str, **kwargs):
        assert service_name == "s3"
        self.client_kwargs = kwargs
        return _ClientContext(FakeS3Client(self))

    def keys(self, bucket: str = "test-bucket"):
        return [key for (b, key) in self.objects if b == bucket]


@pytest.fixture
def s3_session() -> FakeS3Session:
    return FakeS3Session()


@pytest.fixture
def object_store(s3_session) -> ObjectStoreClient:
    return ObjectStoreClient(bucket="test-bucket", region="us-east-1", session=s3_session)


# =============================================================================
# DATABASE
# =============================================================================


@pytest_asyncio.fixture
async def engine():
    engine = build_engine("sqlite+aiosqlite://")
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session(engine):
    async with build_session_factory(engine)() as session:
        yield session


# =============================================================================
# SETTINGS / SERVICE FACTORIES
# =============================================================================


@pytest.fixture
def make_settings(tmp_path):
    def _make(storage_type: str = "filesystem", **overrides) -> Settings:
        values = {
            "storage_type": storage_type,
            "database_url": "sqlite+aiosqlite://",
            "upload_dir": str(tmp_path / "uploads"),
            "s3_bucket_name": "test-bucket",
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _make


@pytest.fixture
def make_service(session, object_store, make_settings):
    def _make(storage_type: str = "filesystem", **overrides) -> DocumentService:
        return DocumentService(session, make_settings(storage_type, **overrides), object_store=object_store)

    return _make


@pytest.fixture
def source_file(tmp_path):
    """Write a file under tmp_path and return its path"""

    def _write(name: str = "note.txt", content: bytes = b"hello") -> str:
        path = tmp_path / name
        path.write_bytes(content)
        return str(path)

    return _write
