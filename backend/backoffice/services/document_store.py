"""
Document store backends for hearing documents.

Both backends expose the same three calls:
  upload(path, data, content_type) -> path
  remove(path)
  get_public_url(path) -> str
"""
from __future__ import annotations

import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from backoffice.core.config import settings
from backoffice.core.logger import logger


class DocumentBackendError(Exception):
    """Raised by a backend when an object operation fails"""


class DocumentStore(ABC):
    @abstractmethod
    def upload(self, path: str, data: bytes, content_type: str = "application/pdf") -> str:
        ...

    @abstractmethod
    def remove(self, path: str) -> None:
        ...

    @abstractmethod
    def get_public_url(self, path: str) -> str:
        ...


class LocalDocumentStore(DocumentStore):
    """
    Filesystem backend rooted at UPLOAD_DIR.
    Files are served by the app under PUBLIC_DOCUMENT_BASE_URL.
    """

    def __init__(self, root: Optional[str] = None, base_url: Optional[str] = None):
        self.root = Path(root or settings.UPLOAD_DIR)
        self.base_url = (base_url if base_url is not None else settings.PUBLIC_DOCUMENT_BASE_URL).rstrip("/")

    def _resolve(self, path: str) -> Path:
        target = (self.root / path).resolve()
        if self.root.resolve() not in target.parents:
            raise DocumentBackendError(f"Path escapes upload directory: {path}")
        return target

    def upload(self, path: str, data: bytes, content_type: str = "application/pdf") -> str:
        target = self._resolve(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as e:
            logger.error(f"Failed to write document {path}: {str(e)}")
            raise DocumentBackendError(str(e)) from e
        logger.info(f"Document stored: {path}")
        return path

    def remove(self, path: str) -> None:
        target = self._resolve(path)
        try:
            os.remove(target)
        except FileNotFoundError:
            logger.warning(f"Document already absent: {path}")
        except OSError as e:
            logger.error(f"Failed to remove document {path}: {str(e)}")
            raise DocumentBackendError(str(e)) from e
        else:
            logger.info(f"Document removed: {path}")

    def get_public_url(self, path: str) -> str:
        return f"{self.base_url}/{path}"


class S3DocumentStore(DocumentStore):
    """
    AWS S3 backend.
    """

    def __init__(self, client=None, bucket: Optional[str] = None, expires_in: int = 3600):
        self.s3_client = client or boto3.client(
            's3',
            region_name=settings.AWS_REGION,
            aws_access_key_id=settings.AWS_ACCESS_KEY_ID or None,
            aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY or None
        )
        self.bucket = bucket or settings.S3_BUCKET_NAME
        self.expires_in = expires_in

    def upload(self, path: str, data: bytes, content_type: str = "application/pdf") -> str:
        try:
            self.s3_client.put_object(
                Bucket=self.bucket,
                Key=path,
                Body=data,
                ContentType=content_type
            )
            logger.info(f"Object uploaded: {path}")
            return path

        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to upload object: {str(e)}")
            raise DocumentBackendError(str(e)) from e

    def remove(self, path: str) -> None:
        try:
            self.s3_client.delete_object(
                Bucket=self.bucket,
                Key=path
            )
            logger.info(f"Object deleted: {path}")

        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to delete object: {str(e)}")
            raise DocumentBackendError(str(e)) from e

    def get_public_url(self, path: str) -> str:
        """
        Pre-signed GET URL, valid for `expires_in` seconds.
        """
        try:
            return self.s3_client.generate_presigned_url(
                'get_object',
                Params={
                    'Bucket': self.bucket,
                    'Key': path
                },
                ExpiresIn=self.expires_in
            )

        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to generate download URL: {str(e)}")
            raise DocumentBackendError(str(e)) from e


def build_document_store(backend: Optional[str] = None) -> DocumentStore:
    backend = (backend or settings.DOCUMENT_STORE_BACKEND).strip().lower()
    if backend == "s3":
        return S3DocumentStore()
    if backend == "local":
        return LocalDocumentStore()
    raise ValueError(f"Unsupported DOCUMENT_STORE_BACKEND: {backend}")
