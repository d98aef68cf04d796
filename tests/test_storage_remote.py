import pytest

from conftest import FakeS3Client
from vrec.errors import StorageError, ValidationError
from vrec.storage.base import BlobMeta, StorageReference
from vrec.storage.remote import RemoteStorageConfig, S3StorageBackend


def _config(**kw):
    base = dict(bucket_name="bucket", access_key_id="AK", secret_access_key="SK")
    base.update(kw)
    return RemoteStorageConfig(**base)


def test_store_uploads_under_folder_and_returns_url_and_id():
    client = FakeS3Client()
    backend = S3StorageBackend(_config(public_base_url="https://cdn.example.com/"), client=client)

    ref = backend.store(b"OggS...", BlobMeta("memo.ogg", "audio/ogg", 7))

    assert ref.is_remote
    assert ref.local_path is None
    assert ref.remote_id == f"voice-recordings/{ref.filename}"
    assert ref.remote_url == f"https://cdn.example.com/voice-recordings/{ref.filename}"
    stored = client.objects[("bucket", ref.remote_id)]
    assert stored["body"] == b"OggS..."
    assert stored["content_type"] == "audio/ogg"
    assert stored["metadata"]["original-filename"] == "memo.ogg"


def test_store_validates_before_calling_provider():
    client = FakeS3Client()
    backend = S3StorageBackend(_config(), client=client, max_bytes=10)
    with pytest.raises(ValidationError):
        backend.store(b"x" * 11, BlobMeta("a.webm", "audio/webm", 11))
    with pytest.raises(ValidationError):
        backend.store(b"x", BlobMeta("a.txt", "text/plain", 1))
    assert client.objects == {}


def test_provider_failures_raise_storage_error():
    backend = S3StorageBackend(_config(), client=FakeS3Client(fail_put=True))
    with pytest.raises(StorageError):
        backend.store(b"x", BlobMeta("a.webm", "audio/webm", 1))

    backend = S3StorageBackend(_config(), client=FakeS3Client(fail_delete=True))
    with pytest.raises(StorageError):
        backend.delete(StorageReference(filename="a.webm", remote_url="u", remote_id="voice-recordings/a.webm"))


def test_delete_removes_object():
    client = FakeS3Client()
    backend = S3StorageBackend(_config(), client=client)
    ref = backend.store(b"x", BlobMeta("a.webm", "audio/webm", 1))
    backend.delete(ref)
    assert client.deleted == [ref.remote_id]
    assert client.objects == {}


def test_object_url_variants():
    assert _config(endpoint_url="http://minio:9000").object_url("k") == "http://minio:9000/bucket/k"
    assert _config(region="eu-west-1").object_url("k") == "https://bucket.s3.eu-west-1.amazonaws.com/k"
    assert _config().object_url("k") == "https://bucket.s3.amazonaws.com/k"
