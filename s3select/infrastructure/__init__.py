"""
Infrastructure package for the S3 Select demo.

Centralizes object store connectivity (client construction, bucket and object
calls, select requests). Keep this layer focused on I/O, decoupled from the
driver and pipeline logic.
"""

from s3select.infrastructure.object_store import (
    BucketNotVisibleError,
    ObjectStoreClient,
    build_s3_client,
)

__all__ = [
    "BucketNotVisibleError",
    "ObjectStoreClient",
    "build_s3_client",
]
