"""Image upload for employee photos.

Main components:
- UploadSink: Abstract base class for image hosts
- CloudinaryUploadSink: Cloudinary signed-upload implementation
- create_upload_sink: Builds the sink from settings
"""

from .base import UploadError, UploadSink
from .cloudinary import CloudinaryUploadSink
from .factory import create_upload_sink

__all__ = [
    "UploadSink",
    "UploadError",
    "CloudinaryUploadSink",
    "create_upload_sink",
]
