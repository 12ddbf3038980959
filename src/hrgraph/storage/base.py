"""Image upload sink interface."""

from abc import ABC, abstractmethod


class UploadError(Exception):
    """The image host rejected the payload or could not be reached."""

    pass


class UploadSink(ABC):
    """Abstract destination for inline encoded images."""

    @abstractmethod
    async def upload(self, payload: str, folder: str) -> str:
        """Upload an encoded image and return its durable URL.

        Args:
            payload: Inline image, typically a ``data:image/...;base64,...`` URL
            folder: Logical folder to file the image under

        Returns:
            HTTPS URL of the stored image

        Raises:
            UploadError: On rejection or transport failure
        """
        pass

    async def aclose(self) -> None:
        """Release network resources held by the sink."""
        pass
