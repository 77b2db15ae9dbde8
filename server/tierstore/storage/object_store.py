import logging
import time
from typing import Any, Callable, Optional, TypeVar

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from botocore.exceptions import ConnectionError as BotoConnectionError
from botocore.exceptions import ReadTimeoutError

from tierstore.errors import BackendUnavailableError, NotFoundError
from tierstore.models import StorageClass
from tierstore.pricing import profile_for
from tierstore.storage.retry import RetryPolicy

logger = logging.getLogger(__name__)

T = TypeVar("T")

_MISSING_CODES = {"NoSuchKey", "404", "NotFound"}


def version_storage_key(user_id: str, file_id: str, version_id: str) -> str:
    return f"{user_id}/{file_id}/{version_id}"


class ObjectStore:
    """
    Blob store backed by an S3 bucket.

    Every call goes through the injected RetryPolicy. Backend errors leave
    this class as tierstore errors: missing keys as NotFoundError,
    everything else as BackendUnavailableError.
    """

    def __init__(
        self,
        bucket: str,
        s3_client: Any = None,
        retry_policy: Optional[RetryPolicy] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.bucket = bucket
        self._s3 = s3_client
        self.retry_policy = retry_policy or RetryPolicy()
        self._sleep = sleep

    @property
    def s3(self) -> Any:
        if self._s3 is None:
            self._s3 = boto3.client("s3")
        return self._s3

    def ensure_bucket(self) -> None:
        try:
            self.s3.head_bucket(Bucket=self.bucket)
        except ClientError as e:
            if e.response["Error"]["Code"] not in ("404", "NoSuchBucket", "NotFound"):
                raise BackendUnavailableError(
                    f"Bucket '{self.bucket}' is not reachable.", resource_id=self.bucket, cause=e
                ) from e
            self._call("create_bucket", self.bucket, lambda: self.s3.create_bucket(Bucket=self.bucket))
            logger.info("Created storage bucket %s", self.bucket)

    def put(
        self,
        key: str,
        data: bytes,
        storage_class: StorageClass,
        content_type: str = "application/octet-stream",
    ) -> None:
        s3_class = profile_for(storage_class).s3_name
        self._call(
            "put",
            key,
            lambda: self.s3.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=data,
                StorageClass=s3_class,
                ContentType=content_type,
            ),
        )

    def delete(self, key: str) -> None:
        self._call("delete", key, lambda: self.s3.delete_object(Bucket=self.bucket, Key=key))

    def change_storage_class(self, key: str, storage_class: StorageClass) -> None:
        s3_class = profile_for(storage_class).s3_name
        self._call(
            "change_storage_class",
            key,
            lambda: self.s3.copy_object(
                Bucket=self.bucket,
                Key=key,
                CopySource={"Bucket": self.bucket, "Key": key},
                StorageClass=s3_class,
                MetadataDirective="COPY",
                TaggingDirective="COPY",
            ),
        )

    def signed_url(self, key: str, ttl_seconds: int) -> str:
        return self._call(
            "signed_url",
            key,
            lambda: self.s3.generate_presigned_url(
                "get_object",
                Params={"Bucket": self.bucket, "Key": key},
                ExpiresIn=ttl_seconds,
            ),
        )

    def exists(self, key: str) -> bool:
        try:
            self._call("head", key, lambda: self.s3.head_object(Bucket=self.bucket, Key=key))
        except NotFoundError:
            return False
        return True

    def _call(self, operation: str, key: str, fn: Callable[[], T]) -> T:
        policy = self.retry_policy
        attempt = 0
        while True:
            try:
                return fn()
            except ClientError as e:
                code = e.response["Error"]["Code"]
                message = e.response["Error"].get("Message", "")
                if code in _MISSING_CODES:
                    raise NotFoundError(
                        f"Object '{key}' does not exist.", resource_id=key, cause=e
                    ) from e
                if not policy.is_retryable_code(code) or attempt + 1 >= policy.max_attempts:
                    raise BackendUnavailableError(
                        f"S3 error ({code}) during {operation}: {message}",
                        resource_id=key,
                        details={"code": code, "operation": operation, "attempts": attempt + 1},
                        cause=e,
                    ) from e
            except (BotoConnectionError, ReadTimeoutError) as e:
                if not policy.retry_connection_errors or attempt + 1 >= policy.max_attempts:
                    raise BackendUnavailableError(
                        f"Object store unreachable during {operation}.",
                        resource_id=key,
                        details={"operation": operation, "attempts": attempt + 1},
                        cause=e,
                    ) from e
            except BotoCoreError as e:
                raise BackendUnavailableError(
                    f"Object store client error during {operation}: {e}",
                    resource_id=key,
                    details={"operation": operation},
                    cause=e,
                ) from e

            delay = policy.delay_for(attempt)
            attempt += 1
            logger.warning(
                "Retrying %s on %s (attempt %d/%d) after %.2fs",
                operation,
                key,
                attempt + 1,
                policy.max_attempts,
                delay,
            )
            self._sleep(delay)
