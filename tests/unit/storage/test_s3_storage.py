"""Unit tests for S3Storage with a mocked boto3 client."""
import io
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from glimpse.infrastructure.storage import (
    DeleteError,
    ObjectNotFoundError,
    S3Storage,
    StorageConfig,
    StorageError,
    UploadError,
)


def client_error(code: str, operation: str = "Op") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


@pytest.fixture
def s3_client():
    return MagicMock()


@pytest.fixture
def s3_storage(s3_client):
    config = StorageConfig(
        backend="minio",
        endpoint_url="http://minio:9000/",
        bucket_name="glimpse",
    )
    return S3Storage(config, client=s3_client)


class TestS3Upload:

    @pytest.mark.asyncio
    async def test_upload_puts_object(self, s3_storage, s3_client):
        key = await s3_storage.upload("p1", b"data", content_type="image/jpeg")

        assert key == "photos/p1"
        s3_client.put_object.assert_called_once_with(
            Bucket="glimpse", Key="photos/p1", Body=b"data", ContentType="image/jpeg"
        )

    @pytest.mark.asyncio
    async def test_upload_reads_file_like(self, s3_storage, s3_client):
        await s3_storage.upload("p1", io.BytesIO(b"stream"))

        assert s3_client.put_object.call_args.kwargs["Body"] == b"stream"

    @pytest.mark.asyncio
    async def test_upload_file_uses_managed_transfer(self, s3_storage, s3_client, tmp_path):
        source = tmp_path / "a.jpg"
        source.write_bytes(b"x")

        key = await s3_storage.upload_file("p1", source, content_type="image/png")

        assert key == "photos/p1"
        s3_client.upload_file.assert_called_once_with(
            str(source), "glimpse", "photos/p1", ExtraArgs={"ContentType": "image/png"}
        )

    @pytest.mark.asyncio
    async def test_upload_error_is_wrapped(self, s3_storage, s3_client):
        s3_client.put_object.side_effect = client_error("AccessDenied")

        with pytest.raises(UploadError):
            await s3_storage.upload("p1", b"data")


class TestS3DownloadDelete:

    @pytest.mark.asyncio
    async def test_download_returns_body(self, s3_storage, s3_client):
        body = MagicMock()
        body.read.return_value = b"bytes"
        s3_client.get_object.return_value = {"Body": body}

        assert await s3_storage.download("p1") == b"bytes"

    @pytest.mark.asyncio
    async def test_download_missing(self, s3_storage, s3_client):
        s3_client.get_object.side_effect = client_error("NoSuchKey")

        with pytest.raises(ObjectNotFoundError):
            await s3_storage.download("p1")

    @pytest.mark.asyncio
    async def test_delete(self, s3_storage, s3_client):
        assert await s3_storage.delete("p1") is True
        s3_client.delete_object.assert_called_once_with(Bucket="glimpse", Key="photos/p1")

    @pytest.mark.asyncio
    async def test_delete_failure(self, s3_storage, s3_client):
        s3_client.delete_object.side_effect = client_error("AccessDenied")

        with pytest.raises(DeleteError):
            await s3_storage.delete("p1")

    @pytest.mark.asyncio
    async def test_delete_by_url(self, s3_storage, s3_client):
        await s3_storage.delete_by_url("http://minio:9000/glimpse/photos/p1")

        s3_client.delete_object.assert_called_once_with(Bucket="glimpse", Key="photos/p1")


class TestS3Urls:

    def test_get_url(self, s3_storage):
        assert s3_storage.get_url("p1") == "http://minio:9000/glimpse/photos/p1"

    def test_parse_url(self, s3_storage):
        assert s3_storage.parse_url("http://minio:9000/glimpse/photos/p1") == ("photos", "p1")

    def test_parse_foreign_url(self, s3_storage):
        with pytest.raises(StorageError):
            s3_storage.parse_url("http://other/glimpse/photos/p1")

    def test_exists_false_on_404(self, s3_storage, s3_client):
        s3_client.head_object.side_effect = client_error("404")

        assert s3_storage.exists("p1") is False

    def test_aws_default_endpoint(self, s3_client):
        storage = S3Storage(
            StorageConfig(backend="s3", bucket_name="b", region="eu-west-1"),
            client=s3_client
        )

        assert storage.get_url("p") == "https://s3.eu-west-1.amazonaws.com/b/photos/p"
