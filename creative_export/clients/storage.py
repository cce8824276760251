"""S3 storage for exported bundles."""

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..errors import UpstreamError


class BundleStorage:
    """Upload zip bundles to S3 and hand out presigned download URLs."""

    def __init__(self, bucket: str, client=None, url_expiration: int = 3600):
        self.bucket = bucket
        self.client = client or boto3.client("s3")
        self.url_expiration = url_expiration

    def upload(self, key: str, data: bytes) -> str:
        """Upload a bundle and return a presigned URL for it."""
        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType="application/zip",
            )
            return self.client.generate_presigned_url(
                "get_object",
                Params={"Bucket": self.bucket, "Key": key},
                ExpiresIn=self.url_expiration,
            )
        except (BotoCoreError, ClientError) as e:
            raise UpstreamError("s3", str(e)) from e
