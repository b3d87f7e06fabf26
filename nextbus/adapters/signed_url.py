"""
Pre-signed S3 URLs for assets the voice skill plays or displays.
"""

from __future__ import annotations

import logging
from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from ..domain.exceptions import ConfigurationError, SignedUrlError

logger = logging.getLogger(__name__)


class SignedUrlClient:
    """
    Generates short-lived GET URLs for objects in one S3 bucket.

    Region, bucket and expiry are explicit fields; callers construct one
    client and hand it to whatever needs asset URLs.
    """

    DEFAULT_EXPIRES_SECONDS = 60

    def __init__(
        self,
        bucket: str,
        region: str | None = None,
        expires_seconds: int = DEFAULT_EXPIRES_SECONDS,
        s3_client: Any | None = None,
    ):
        """
        Initialize the client.

        Args:
            bucket: Bucket holding the assets
            region: AWS region of the bucket
            expires_seconds: Lifetime of generated URLs
            s3_client: Optional pre-built boto3 S3 client (tests inject a stub)
        """
        if not bucket:
            raise ConfigurationError("An S3 bucket is required to generate signed URLs")
        if expires_seconds <= 0:
            raise ConfigurationError("expires_seconds must be greater than zero")

        self.bucket = bucket
        self.region = region
        self.expires_seconds = expires_seconds
        self._s3 = s3_client or boto3.client(
            "s3",
            region_name=region,
            config=Config(signature_version="s3v4"),
        )

    def get_signed_url(self, key: str) -> str:
        """
        Return a pre-signed GET URL for ``key``.

        Raises:
            SignedUrlError: If the URL cannot be generated
        """
        try:
            url = self._s3.generate_presigned_url(
                "get_object",
                Params={"Bucket": self.bucket, "Key": key},
                ExpiresIn=self.expires_seconds,
            )
        except (BotoCoreError, ClientError) as exc:
            raise SignedUrlError(f"Failed to sign s3://{self.bucket}/{key}: {exc}") from exc

        logger.info("Signed URL for s3://%s/%s (expires in %ds)", self.bucket, key, self.expires_seconds)
        return url
