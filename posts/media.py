import logging
import os
import time

from django.conf import settings
from django.core.files.storage import default_storage
from rest_framework import serializers

from .domain import Image, Video

logger = logging.getLogger(__name__)


def _media_settings():
    return settings.CIVICFEED


def validate_media_file(upload):
    """
    Reject anything that is not a small image or video.
    Both the file extension and the declared content type must match.
    """
    conf = _media_settings()
    allowed = conf['ALLOWED_MEDIA_EXTENSIONS']

    if upload.size > conf['MAX_UPLOAD_BYTES']:
        raise serializers.ValidationError(
            f"File too large. Maximum size is {conf['MAX_UPLOAD_BYTES'] // (1024 * 1024)}MB."
        )

    extension = os.path.splitext(upload.name or '')[1].lower().lstrip('.')
    content_type = (getattr(upload, 'content_type', '') or '').lower()
    subtype = content_type.split('/')[-1]
    # video/quicktime and video/x-msvideo are the registered types for mov/avi
    subtype = {'quicktime': 'mov', 'x-msvideo': 'avi'}.get(subtype, subtype)

    if extension not in allowed or subtype not in allowed or not content_type.startswith(('image/', 'video/')):
        raise serializers.ValidationError("Only image and video files are allowed")
    return upload


class MediaStore:
    """Saves uploads through Django's storage API and reports the public URL."""

    def __init__(self, storage=None):
        self.storage = storage or default_storage

    def save(self, upload):
        extension = os.path.splitext(upload.name or '')[1].lower()
        filename = f"{int(time.time() * 1000)}{extension}"
        path = self.storage.save(os.path.join(_media_settings()['UPLOAD_DIR'], filename), upload)
        url = self.storage.url(path)
        logger.info("Stored upload %s as %s", upload.name, path)

        content_type = (getattr(upload, 'content_type', '') or '').lower()
        if content_type.startswith('video'):
            return Video(url)
        return Image(url)
