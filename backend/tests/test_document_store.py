"""Tests for the local and S3 document store backends."""

import boto3
import pytest
from botocore.stub import Stubber

from backoffice.services.document_store import (
    DocumentBackendError,
    LocalDocumentStore,
    S3DocumentStore,
    build_document_store,
)


def test_local_store_round_trip(tmp_path):
    store = LocalDocumentStore(root=str(tmp_path), base_url="/files/")

    path = store.upload("hearings/1_a.pdf", b"%PDF")

    assert (tmp_path / "hearings" / "1_a.pdf").read_bytes() == b"%PDF"
    assert store.get_public_url(path) == "/files/hearings/1_a.pdf"

    store.remove(path)
    assert not (tmp_path / "hearings" / "1_a.pdf").exists()
    # removing twice is harmless
    store.remove(path)


def test_local_store_refuses_paths_outside_root(tmp_path):
    store = LocalDocumentStore(root=str(tmp_path / "uploads"))
    with pytest.raises(DocumentBackendError):
        store.upload("../escape.pdf", b"x")


@pytest.fixture
def s3_client():
    return boto3.client(
        "s3",
        region_name="us-east-1",
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
    )


def test_s3_upload_and_remove(s3_client):
    store = S3DocumentStore(client=s3_client, bucket="docs")
    with Stubber(s3_client) as stub:
        stub.add_response(
            "put_object",
            {},
            {"Bucket": "docs", "Key": "hearings/1_a.pdf", "Body": b"%PDF", "ContentType": "application/pdf"},
        )
        stub.add_response("delete_object", {}, {"Bucket": "docs", "Key": "hearings/1_a.pdf"})

        assert store.upload("hearings/1_a.pdf", b"%PDF") == "hearings/1_a.pdf"
        store.remove("hearings/1_a.pdf")
        stub.assert_no_pending_responses()


def test_s3_errors_are_wrapped(s3_client):
    store = S3DocumentStore(client=s3_client, bucket="docs")
    with Stubber(s3_client) as stub:
        stub.add_client_error("delete_object", service_error_code="AccessDenied", http_status_code=403)
        with pytest.raises(DocumentBackendError):
            store.remove("hearings/1_a.pdf")


def test_s3_public_url_is_presigned(s3_client):
    store = S3DocumentStore(client=s3_client, bucket="docs")
    url = store.get_public_url("hearings/1_a.pdf")
    assert "docs" in url
    assert "hearings/1_a.pdf" in url
    assert "Signature" in url or "X-Amz-Signature" in url


def test_build_document_store_selects_backend():
    assert isinstance(build_document_store("local"), LocalDocumentStore)
    with pytest.raises(ValueError):
        build_document_store("ftp")
