"""Unit tests for ObjectStoreClient against a fake aioboto3 session."""

import pytest
from botocore.exceptions import EndpointConnectionError, NoCredentialsError

from docstore.core.exceptions import (
    BackendUnavailableError,
    ObjectNotFoundError,
    TransportError,
)
from docstore.infrastructure.object_store import ObjectStoreClient
from tests.conftest import client_error


@pytest.mark.storage
@pytest.mark.asyncio
class TestObjectStoreClient:
    async def test_put_and_get(self, object_store, s3_session):
        key = await object_store.put("documents/a.txt", b"Hello, World!", content_type="text/plain")

        assert key == "documents/a.txt"
        assert s3_session.content_types[("test-bucket", key)] == "text/plain"
        assert await object_store.get(key) == b"Hello, World!"

    async def test_client_uses_configured_connection(self, s3_session):
        client = ObjectStoreClient(
            bucket="test-bucket",
            region="eu-west-1",
            access_key="AKIA",
            secret_key="secret",
            endpoint_url="http://localhost:9000",
            session=s3_session,
        )
        await client.put("k", b"x")

        assert s3_session.client_kwargs == {
            "region_name": "eu-west-1",
            "aws_access_key_id": "AKIA",
            "aws_secret_access_key": "secret",
            "endpoint_url": "http://localhost:9000",
        }

    async def test_get_missing_object(self, object_store):
        with pytest.raises(ObjectNotFoundError):
            await object_store.get("documents/missing.txt")

    async def test_get_without_body(self, object_store, s3_session):
        await object_store.put("documents/a.txt", b"data")
        s3_session.empty_bodies = True

        with pytest.raises(ObjectNotFoundError, match="No content"):
            await object_store.get("documents/a.txt")

    async def test_put_unreachable_endpoint(self, object_store, s3_session):
        s3_session.failures["put_object"] = EndpointConnectionError(endpoint_url="http://s3.invalid")

        with pytest.raises(BackendUnavailableError, match="s3.invalid"):
            await object_store.put("documents/a.txt", b"data")

    async def test_put_without_credentials(self, object_store, s3_session):
        s3_session.failures["put_object"] = NoCredentialsError()

        with pytest.raises(BackendUnavailableError, match="Failed to upload file to S3"):
            await object_store.put("documents/a.txt", b"data")

    async def test_put_rejected(self, object_store, s3_session):
        s3_session.failures["put_object"] = client_error("AccessDenied", "PutObject", "Access Denied")

        with pytest.raises(TransportError, match="Access Denied"):
            await object_store.put("documents/a.txt", b"data")

    async def test_get_transport_failure(self, object_store, s3_session):
        s3_session.failures["get_object"] = client_error("InternalError", "GetObject")

        with pytest.raises(TransportError):
            await object_store.get("documents/a.txt")

    async def test_delete(self, object_store, s3_session):
        await object_store.put("documents/a.txt", b"data")
        await object_store.delete("documents/a.txt")

        assert s3_session.keys() == []

    async def test_delete_failure(self, object_store, s3_session):
        s3_session.failures["delete_object"] = client_error("InternalError", "DeleteObject", "oops")

        with pytest.raises(TransportError, match="Failed to delete file from S3"):
            await object_store.delete("documents/a.txt")


@pytest.mark.storage
class TestGenerateKey:
    def test_keys_are_unique(self, object_store):
        keys = {object_store.generate_key("report.pdf") for _ in range(10_000)}
        assert len(keys) == 10_000

    def test_keys_are_unique_for_distinct_names(self, object_store):
        keys = {object_store.generate_key(f"file-{i}.txt") for i in range(10_000)}
        assert len(keys) == 10_000

    def test_name_is_sanitized(self, object_store):
        key = object_store.generate_key("a b.txt")

        assert " " not in key
        assert key.endswith("-a_b.txt")

    def test_disallowed_characters_replaced(self, object_store):
        key = object_store.generate_key("résumé (final)/v2.txt")
        name = key.split("-", 2)[2]

        assert name == "r_sum___final__v2.txt"

    def test_keys_are_prefixed(self, s3_session):
        client = ObjectStoreClient(bucket="b", key_prefix="/uploads/", session=s3_session)
        assert client.generate_key("x.txt").startswith("uploads/")

    def test_default_prefix(self, object_store):
        assert object_store.generate_key("x.txt").startswith("documents/")
