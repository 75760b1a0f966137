# custom_storages.py

from django.conf import settings
from django.core.files.storage import FileSystemStorage
from storages.backends.s3boto3 import S3Boto3Storage

UPLOADS_LOCATION = getattr(settings, 'UPLOADS_LOCATION', 'uploads')


class UploadsStorage(S3Boto3Storage):
    location = UPLOADS_LOCATION
    file_overwrite = False


def select_uploads_storage():
    # S3 when a bucket is configured, local media otherwise
    if getattr(settings, 'AWS_STORAGE_BUCKET_NAME', None):
        return UploadsStorage()
    return FileSystemStorage()
