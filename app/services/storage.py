"""
Image storage on Cloudinary
The SDK is blocking, so every call runs in the default executor
"""

import asyncio
import logging
from functools import partial
from typing import Any, Dict, Optional

import cloudinary
import cloudinary.uploader

from app.core.config import settings
from app.core.exceptions import InternalServerException

logger = logging.getLogger(__name__)

class StorageService:
    """Uploads payment proofs and other images to the CDN"""

    def __init__(self):
        self.configured = all((
            settings.CLOUDINARY_CLOUD_NAME,
            settings.CLOUDINARY_API_KEY,
            settings.CLOUDINARY_API_SECRET,
        ))
        if self.configured:
            cloudinary.config(
                cloud_name=settings.CLOUDINARY_CLOUD_NAME,
                api_key=settings.CLOUDINARY_API_KEY,
                api_secret=settings.CLOUDINARY_API_SECRET,
                secure=True
            )

    async def _run(self, func, *args, **kwargs):
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, partial(func, *args, **kwargs))

    async def upload_image(self, file_path: str, folder: str, public_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Upload a local image file

        Returns:
            ``{"url": secure URL, "public_id": CDN id}``

        Raises:
            InternalServerException: Storage not configured or the upload failed
        """
        if not self.configured:
            logger.error("Image upload to %s refused: Cloudinary credentials missing", folder)
            raise InternalServerException("Image storage is not configured", error_code="STORAGE_UNAVAILABLE")

        options = {"folder": folder, "resource_type": "image"}
        if public_id:
            options.update(public_id=public_id, overwrite=True)

        try:
            result = await self._run(cloudinary.uploader.upload, file_path, **options)
        except Exception as e:
            logger.error("Image upload to %s failed: %s", folder, e)
            raise InternalServerException("Image upload failed", error_code="UPLOAD_FAILED")

        logger.info("Uploaded image %s", result["public_id"])
        return {"url": result["secure_url"], "public_id": result["public_id"]}

    async def delete_image(self, public_id: str) -> bool:
        """Remove an uploaded image; failures are logged, not raised"""
        if not self.configured:
            return False

        try:
            result = await self._run(cloudinary.uploader.destroy, public_id)
        except Exception as e:
            logger.error("Failed to delete image %s: %s", public_id, e)
            return False

        return result.get("result") == "ok"
