"""Product image storage.

Images are written under ``IMAGE_STORAGE_DIR`` using the object path
``sellers/<seller_id>/products/<timestamp_ms>_<filename>`` and exposed under
``IMAGE_BASE_URL``. Deletion is best-effort: a missing object is ignored.
"""
import logging
import os
import time

from flask import current_app
from werkzeug.utils import secure_filename

from app.exceptions import OperationFailedError

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {"png", "jpg", "jpeg", "gif", "webp"}


class LocalImageStore:
    def __init__(self, root: str, base_url: str):
        self.root = os.path.abspath(root)
        self.base_url = base_url.rstrip("/")

    def _full_path(self, object_path: str) -> str:
        full = os.path.abspath(os.path.join(self.root, object_path))
        if not full.startswith(self.root + os.sep):
            raise ValueError("object path escapes storage root")
        return full

    def object_path_for(self, url: str):
        """Map a public URL back to its object path, or None if it is not ours."""
        prefix = self.base_url + "/"
        if not url or not url.startswith(prefix):
            return None
        return url[len(prefix):]

    def upload(self, file, seller_id: str) -> str:
        filename = secure_filename(file.filename or "")
        ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
        if ext not in ALLOWED_EXTENSIONS:
            raise OperationFailedError("Unsupported image type")
        object_path = f"sellers/{seller_id}/products/{int(time.time() * 1000)}_{filename}"
        try:
            full = self._full_path(object_path)
            os.makedirs(os.path.dirname(full), exist_ok=True)
            file.save(full)
        except (OSError, ValueError) as e:
            logger.error("Image upload failed for %s: %s", object_path, e, exc_info=True)
            raise OperationFailedError("Failed to upload image. Please try again.")
        logger.info("Image stored at %s", object_path)
        return f"{self.base_url}/{object_path}"

    def delete(self, url: str) -> None:
        object_path = self.object_path_for(url)
        if object_path is None:
            logger.info("Skipping delete of foreign image %s", url)
            return
        try:
            os.remove(self._full_path(object_path))
        except FileNotFoundError:
            logger.warning("Image already gone: %s", object_path)
        except (OSError, ValueError) as e:
            logger.error("Image delete failed for %s: %s", object_path, e)


def get_image_store() -> LocalImageStore:
    store = current_app.extensions.get("image_store")
    if store is None:
        store = LocalImageStore(
            current_app.config["IMAGE_STORAGE_DIR"],
            current_app.config["IMAGE_BASE_URL"],
        )
        current_app.extensions["image_store"] = store
    return store
