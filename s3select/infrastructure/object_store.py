"""
Object store access for the S3 Select demo.

Wraps a boto3 S3 client behind the handful of calls the demo needs: bucket
existence check and creation, object upload, and ``select_object_content``.
The client never filters or evaluates anything itself; it only marshals the
request and hands back the response stream.

Failures from the store propagate unchanged. The only waiting loop is the
post-creation visibility check, which polls ``head_bucket`` with tenacity
until the new bucket shows up.
"""

from __future__ import annotations

from typing import Any, Optional

import boto3
from botocore.exceptions import ClientError
from tenacity import retry, retry_if_result, stop_after_attempt, wait_exponential

from s3select.config import Settings, get_settings
from s3select.events import SelectResult
from s3select.formats import Serialization
from s3select.utils.logging import get_logger

log = get_logger(__name__)

_MISSING_BUCKET_CODES = frozenset({"404", "NoSuchBucket", "NotFound"})
_DEFAULT_REGION = "us-east-1"


class BucketNotVisibleError(RuntimeError):
    """Raised when a freshly created bucket never becomes visible."""


def build_s3_client(settings: Optional[Settings] = None) -> Any:
    """
    Create a boto3 S3 client from settings.

    Static keys are used only when both halves of the pair are configured;
    otherwise boto3 resolves credentials through its default chain
    (environment, shared config, instance profile). ``aws_endpoint_url``
    points the client at MinIO/LocalStack style endpoints.
    """
    settings = settings or get_settings()
    session_kwargs: dict[str, Any] = {"region_name": settings.aws_region}
    if settings.aws_access_key_id and settings.aws_secret_access_key:
        session_kwargs["aws_access_key_id"] = settings.aws_access_key_id
        session_kwargs["aws_secret_access_key"] = settings.aws_secret_access_key
    session = boto3.session.Session(**session_kwargs)
    if settings.aws_endpoint_url:
        return session.client("s3", endpoint_url=settings.aws_endpoint_url)
    return session.client("s3")


class ObjectStoreClient:
    """
    Thin wrapper over a boto3 S3 client.

    Parameters
    ----------
    client : Any
        A boto3 S3 client (or anything exposing the same methods).
    region : str
        Region used for the bucket location constraint.
    """

    def __init__(self, client: Any, region: str = _DEFAULT_REGION) -> None:
        self._client = client
        self.region = region

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "ObjectStoreClient":
        settings = settings or get_settings()
        return cls(build_s3_client(settings), region=settings.aws_region)

    def bucket_exists(self, name: str) -> bool:
        """
        Whether ``name`` exists and is reachable with the current credentials.

        A 403 (bucket owned by another account) is not "missing" and propagates.
        """
        try:
            self._client.head_bucket(Bucket=name)
        except ClientError as exc:
            code = str(exc.response.get("Error", {}).get("Code", ""))
            if code in _MISSING_BUCKET_CODES:
                return False
            raise
        return True

    def create_bucket(self, name: str) -> None:
        """
        Create ``name`` and wait until it is visible.

        Callers should check ``bucket_exists`` first; creating a bucket the
        caller already owns is a conflict outside ``us-east-1``.
        """
        kwargs: dict[str, Any] = {"Bucket": name}
        if self.region and self.region != _DEFAULT_REGION:
            kwargs["CreateBucketConfiguration"] = {"LocationConstraint": self.region}
        log.info("Creating bucket", extra={"bucket": name, "region": self.region})
        self._client.create_bucket(**kwargs)
        self._wait_until_visible(name)

    @retry(
        stop=stop_after_attempt(5),
        wait=wait_exponential(multiplier=0.5, min=0.5, max=5),
        retry=retry_if_result(lambda visible: visible is False),
        retry_error_callback=lambda state: False,
    )
    def _poll_bucket(self, name: str) -> bool:
        return self.bucket_exists(name)

    def _wait_until_visible(self, name: str) -> None:
        if not self._poll_bucket(name):
            raise BucketNotVisibleError(f"Bucket '{name}' not visible after creation")

    def ensure_bucket(self, name: str) -> bool:
        """
        Create ``name`` unless it already exists.

        Returns True if the bucket was created by this call. A concurrent
        creator racing between the check and the create is not handled.
        """
        if self.bucket_exists(name):
            log.debug("Bucket already exists", extra={"bucket": name})
            return False
        self.create_bucket(name)
        return True

    def put_object(
        self,
        bucket: str,
        key: str,
        data: bytes,
        content_type: Optional[str] = None,
    ) -> None:
        """Upload ``data`` to ``bucket/key``, replacing any existing object."""
        kwargs: dict[str, Any] = {"Bucket": bucket, "Key": key, "Body": data}
        if content_type:
            kwargs["ContentType"] = content_type
        self._client.put_object(**kwargs)
        log.info("Uploaded object", extra={"bucket": bucket, "key": key, "bytes": len(data)})

    def select_object_content(
        self,
        bucket: str,
        key: str,
        expression: str,
        input_serialization: Serialization,
        output_serialization: Serialization,
    ) -> SelectResult:
        """
        Submit a server-side SQL filter over ``bucket/key``.

        Returns
        -------
        SelectResult
            Response handle whose ``payload`` streams the result events.
            The caller owns it and must close it.
        """
        log.debug(
            "Submitting select",
            extra={"bucket": bucket, "key": key, "expression": expression},
        )
        response = self._client.select_object_content(
            Bucket=bucket,
            Key=key,
            ExpressionType="SQL",
            Expression=expression,
            InputSerialization=input_serialization,
            OutputSerialization=output_serialization,
        )
        return SelectResult(response)


__all__ = [
    "BucketNotVisibleError",
    "ObjectStoreClient",
    "build_s3_client",
]
