"""Recipe image storage."""

from recibook.services.storage.exceptions import UnsafeImageSourceError, UploadError
from recibook.services.storage.protocol import ObjectStorage
from recibook.services.storage.service import ImageUploadService, generate_object_name


__all__ = [
    "ImageUploadService",
    "ObjectStorage",
    "UnsafeImageSourceError",
    "UploadError",
    "generate_object_name",
]
