"""
Amazon S3 snapshot storage.

Snapshots are stored as ``<prefix>/<name>.json`` objects in a bucket, so
several installations can share exports.
"""

import logging
from typing import List, Optional

import boto3
from botocore.exceptions import ClientError, NoCredentialsError

from .base import (
    SnapshotStorage,
    StorageError,
    StorageNotFoundError,
    StoragePermissionError,
)

logger = logging.getLogger(__name__)

SNAPSHOT_SUFFIX = ".json"

NOT_FOUND_CODES = {"NoSuchKey", "404"}
DENIED_CODES = {"AccessDenied", "403"}


def _error_code(error: ClientError) -> str:
    return str(error.response.get("Error", {}).get("Code", ""))


class S3SnapshotStorage(SnapshotStorage):
    """Snapshot storage backed by an S3 bucket."""

    def __init__(
        self,
        bucket_name: str,
        region_name: str = "us-east-1",
        aws_access_key_id: Optional[str] = None,
        aws_secret_access_key: Optional[str] = None,
        prefix: str = "",
    ):
        """
        Initialize the S3 snapshot storage.

        Args:
            bucket_name: Name of the S3 bucket
            region_name: AWS region name
            aws_access_key_id: AWS access key ID (optional, can use IAM roles)
            aws_secret_access_key: AWS secret access key (optional, can use IAM roles)
            prefix: Optional key prefix for all snapshots

        Raises:
            StorageError: If the bucket cannot be reached
        """
        self.bucket_name = bucket_name
        self.region_name = region_name
        self.prefix = prefix.strip("/")

        client_kwargs = {"region_name": region_name}
        if aws_access_key_id and aws_secret_access_key:
            client_kwargs.update(
                {
                    "aws_access_key_id": aws_access_key_id,
                    "aws_secret_access_key": aws_secret_access_key,
                }
            )
        self.s3_client = boto3.client("s3", **client_kwargs)

        try:
            self.s3_client.head_bucket(Bucket=bucket_name)
        except NoCredentialsError:
            raise StorageError("AWS credentials not found")
        except ClientError as e:
            code = _error_code(e)
            if code in NOT_FOUND_CODES:
                raise StorageError(f"S3 bucket '{bucket_name}' not found")
            if code in DENIED_CODES:
                raise StoragePermissionError(f"Access denied to S3 bucket '{bucket_name}'")
            raise StorageError(f"Failed to connect to S3: {e}")

    def _get_s3_key(self, name: str) -> str:
        key = f"{name.strip('/')}{SNAPSHOT_SUFFIX}"
        if self.prefix:
            return f"{self.prefix}/{key}"
        return key

    def _translate(self, error: ClientError, action: str, name: str) -> StorageError:
        code = _error_code(error)
        if code in NOT_FOUND_CODES:
            return StorageNotFoundError(f"Snapshot not found: {name}")
        if code in DENIED_CODES:
            return StoragePermissionError(f"Permission denied {action} snapshot {name}: {error}")
        return StorageError(f"Failed {action} snapshot {name}: {error}")

    def _write(self, name: str, content: bytes) -> str:
        s3_key = self._get_s3_key(name)
        try:
            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=s3_key,
                Body=content,
                ContentType="application/json",
            )
        except ClientError as e:
            raise self._translate(e, "storing", name)

        logger.info(f"Stored snapshot {name} at s3://{self.bucket_name}/{s3_key}")
        return s3_key

    def _read(self, name: str) -> bytes:
        try:
            response = self.s3_client.get_object(
                Bucket=self.bucket_name, Key=self._get_s3_key(name)
            )
        except ClientError as e:
            raise self._translate(e, "reading", name)
        return response["Body"].read()

    def delete_snapshot(self, name: str) -> bool:
        if not self.snapshot_exists(name):
            return False
        try:
            self.s3_client.delete_object(Bucket=self.bucket_name, Key=self._get_s3_key(name))
        except ClientError as e:
            raise self._translate(e, "deleting", name)
        return True

    def snapshot_exists(self, name: str) -> bool:
        try:
            self.s3_client.head_object(Bucket=self.bucket_name, Key=self._get_s3_key(name))
        except ClientError as e:
            if _error_code(e) in NOT_FOUND_CODES:
                return False
            raise self._translate(e, "checking", name)
        return True

    def list_snapshots(self) -> List[str]:
        list_prefix = f"{self.prefix}/" if self.prefix else ""
        names = []
        try:
            paginator = self.s3_client.get_paginator("list_objects_v2")
            for page in paginator.paginate(Bucket=self.bucket_name, Prefix=list_prefix):
                for obj in page.get("Contents", []):
                    key = obj["Key"][len(list_prefix):]
                    if key.endswith(SNAPSHOT_SUFFIX) and "/" not in key:
                        names.append(key[: -len(SNAPSHOT_SUFFIX)])
        except ClientError as e:
            raise StorageError(f"Failed to list snapshots: {e}")
        return sorted(names)
