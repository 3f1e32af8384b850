"""Image upload and download operations."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import IO, Any

from ..core.logger import get_logger
from ..core.result import Result
from .endpoints import IM, Endpoint
from .models import ImageType

logger = get_logger("apis.media")


class MediaMixin:
    """Mixin providing image functionality.

    This mixin should be used with a class that has:
    - self.call(endpoint, ...) -> Result | Path | str
    """

    def call(self, endpoint: Endpoint, **kwargs: Any) -> Any:
        """Call an endpoint. To be implemented by main class."""
        raise NotImplementedError

    def upload_image(
        self,
        image: str | Path | bytes | IO[bytes],
        image_type: ImageType = "message",
    ) -> Result:
        """Upload an image.

        Args:
            image: File path, raw bytes, or a binary file object.
            image_type: "message" for chat images, "avatar" for avatars.

        Returns:
            Result whose payload carries the ``image_key``.
        """
        if isinstance(image, str):
            image = Path(image)
        result = self.call(IM.UPLOAD_IMAGE, form={"image": image, "image_type": image_type})
        if isinstance(result, Result):
            logger.info("Image uploaded: %s", result.payload.get("image_key", ""))
        return result

    def download_image(
        self, image_key: str, params: Mapping[str, Any] | None = None
    ) -> Path | Result:
        """Download an image to a temporary file.

        The caller owns the returned file and must delete it. A JSON body
        (an error envelope) comes back as a ``Result`` instead.
        """
        return self.call(
            IM.DOWNLOAD_IMAGE,
            path_args={"image_key": image_key},
            params=params,
        )
