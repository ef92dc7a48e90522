"""
Delivery
========
Các collaborators nhận output của pipeline.

Uploaders (lưu artifact):
    - LocalFileUploader: Ghi file vào thư mục output
    - S3Uploader: Upload lên S3 bucket (tạo bucket nếu chưa có)

Notifiers (gửi recommendation):
    - ConsoleNotifier: In message ra stdout
"""

import io
import logging
import os
from datetime import date
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..errors import DeliveryError

logger = logging.getLogger(__name__)


class LocalFileUploader:
    """Ghi artifact thành file '<output_dir>/<resource>.<ext>'."""

    def __init__(self, output_dir: str = '.'):
        self.output_dir = output_dir

    def upload(self, resource: str, body: bytes, extension: str) -> str:
        path = os.path.join(self.output_dir, f"{resource}.{extension}")
        try:
            os.makedirs(self.output_dir, exist_ok=True)
            with open(path, 'wb') as f:
                f.write(body)
        except OSError as e:
            raise DeliveryError(resource, e) from e

        logger.info("Wrote %s", path)
        return path


class S3Uploader:
    """
    Upload artifact lên S3.

    Key: '<YYYY-MM-DD><resource>.<ext>'

    Attributes:
        region: AWS region
        bucket_name: Tên bucket
        client: boto3 S3 client (inject được cho testing)
    """

    def __init__(self, region: str, bucket_name: str, client=None, today: Optional[date] = None):
        self.region = region
        self.bucket_name = bucket_name
        self.client = client or boto3.client('s3', region_name=region)
        self.today = today
        self._bucket_checked = False

    def bucket_exists(self) -> bool:
        response = self.client.list_buckets()
        return any(b['Name'] == self.bucket_name for b in response.get('Buckets', []))

    def create_bucket(self):
        """Tạo bucket và chờ đến khi bucket sẵn sàng."""
        params = {'Bucket': self.bucket_name}
        if self.region != 'us-east-1':
            params['CreateBucketConfiguration'] = {'LocationConstraint': self.region}

        self.client.create_bucket(**params)
        logger.info("Waiting for bucket %s to be created...", self.bucket_name)
        self.client.get_waiter('bucket_exists').wait(Bucket=self.bucket_name)
        logger.info("Bucket %s successfully created", self.bucket_name)

    def ensure_bucket(self):
        if self._bucket_checked:
            return
        if not self.bucket_exists():
            self.create_bucket()
        self._bucket_checked = True

    def object_key(self, resource: str, extension: str) -> str:
        day = self.today or date.today()
        return f"{day.strftime('%Y-%m-%d')}{resource}.{extension}"

    def upload(self, resource: str, body: bytes, extension: str) -> str:
        key = self.object_key(resource, extension)
        try:
            self.ensure_bucket()
            self.client.upload_fileobj(io.BytesIO(body), self.bucket_name, key)
        except (BotoCoreError, ClientError) as e:
            raise DeliveryError(resource, e) from e

        logger.info("Uploaded graph for %s to s3://%s/%s", resource, self.bucket_name, key)
        return key


class ConsoleNotifier:
    """In recommendation ra stdout."""

    def notify(self, resource: str, message: str):
        logger.debug("Recommendation for %s", resource)
        print(message)
