# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""S3-compatible object storage for exported reports.

Works with AWS S3 and S3-compatible services such as MinIO or LocalStack.
PutObject replaces the object atomically: a failed upload leaves any
previous report under the same key untouched.
"""

import asyncio
import logging

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from opened_catalog.infrastructure.storage.base import ReportSink, StorageError

logger = logging.getLogger(__name__)

REPORT_CONTENT_TYPE = "text/csv"


class S3ReportSink(ReportSink):
    """Report sink writing one object per report into a bucket."""

    def __init__(
        self,
        bucket: str,
        endpoint_url: str | None = None,
        region: str = "us-east-1",
        access_key: str | None = None,
        secret_key: str | None = None,
        client=None,
    ):
        self.bucket = bucket

        if client is not None:
            self.client = client
        else:
            client_kwargs = {
                "service_name": "s3",
                "region_name": region,
                "config": Config(signature_version="s3v4"),
            }
            if endpoint_url:
                client_kwargs["endpoint_url"] = endpoint_url
            # Without explicit keys boto3 falls back to its credential chain
            if access_key and secret_key:
                client_kwargs["aws_access_key_id"] = access_key
                client_kwargs["aws_secret_access_key"] = secret_key
            self.client = boto3.client(**client_kwargs)

        logger.info("S3 report sink ready: bucket=%s, endpoint=%s", bucket, endpoint_url)

    async def put(self, name: str, content: str) -> None:
        """Upload the report as a single object keyed by name."""
        key = name.lstrip("/")
        body = content.encode("utf-8")

        try:
            await asyncio.to_thread(
                self.client.put_object,
                Bucket=self.bucket,
                Key=key,
                Body=body,
                ContentType=REPORT_CONTENT_TYPE,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error("Failed to write report %s to bucket %s: %s", key, self.bucket, e)
            raise StorageError(f"Failed to write s3://{self.bucket}/{key}", e) from e

        logger.info("Wrote report s3://%s/%s (%d bytes)", self.bucket, key, len(body))
