"""Factory for the configured image upload sink."""

from ..config import Settings
from ..errors import ConfigurationError
from ..logging import get_logger
from .base import UploadSink
from .cloudinary import CloudinaryUploadSink

logger = get_logger(__name__)


def create_upload_sink(settings: Settings) -> UploadSink | None:
    """Create the upload sink from settings.

    Returns None when no image host credentials are configured at all, so the
    service can still run and reject photo payloads at request time.

    Raises:
        ConfigurationError: If only some of the Cloudinary credentials are set
    """
    credentials = {
        "cloud_name": settings.cloudinary_cloud_name,
        "api_key": settings.cloudinary_api_key,
        "api_secret": settings.cloudinary_api_secret,
    }
    missing = [name for name, value in credentials.items() if not value]

    if len(missing) == len(credentials):
        logger.warning("Image upload disabled: Cloudinary credentials are not configured")
        return None
    if missing:
        raise ConfigurationError(
            f"Cloudinary configuration incomplete, missing: {', '.join(missing)}"
        )

    logger.info("Image upload configured", provider="cloudinary", cloud_name=settings.cloudinary_cloud_name)
    return CloudinaryUploadSink(
        cloud_name=credentials["cloud_name"],
        api_key=credentials["api_key"],
        api_secret=credentials["api_secret"],
    )
