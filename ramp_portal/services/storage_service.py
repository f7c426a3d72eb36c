"""
Receipt storage — local object store for expense and travel receipts.

Objects are written under RECEIPT_STORAGE_DIR as
``<folder>/<epoch_ms>_<random hex>_<safe filename>`` and addressed by the URL
``RECEIPT_URL_PREFIX/<key>``, which the receipts blueprint serves back to
authenticated users. Keys never leave the storage root.
"""

import logging
import time
import uuid
from pathlib import Path

from flask import current_app
from werkzeug.utils import secure_filename

from ramp_portal.core.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

FOLDER_EQUIPMENT = "receipts/equipment"
FOLDER_SUPPLIES = "receipts/supplies"
FOLDER_TRAVEL = "receipts/travel"


class ReceiptStorage:
    """File-system backed receipt store.

    Args:
        root: Storage directory. Defaults to RECEIPT_STORAGE_DIR.
        url_prefix: Public URL prefix. Defaults to RECEIPT_URL_PREFIX.
    """

    def __init__(self, root=None, url_prefix=None):
        self.root = Path(root or current_app.config["RECEIPT_STORAGE_DIR"]).resolve()
        self.url_prefix = (url_prefix or current_app.config["RECEIPT_URL_PREFIX"]).rstrip("/")

    def _path_for(self, key: str) -> Path:
        path = (self.root / key).resolve()
        if self.root not in path.parents:
            raise NotFoundError(resource="Receipt", resource_id=key)
        return path

    def save(self, file, folder: str) -> str:
        """Store an uploaded ``FileStorage`` and return its retrieval URL."""
        filename = secure_filename(file.filename or "")
        if not filename or "." not in filename:
            raise ValidationError(
                "Receipt must have a file name with an extension",
                details={"receipt": "invalid file name"},
            )
        content = file.read()
        if not content:
            raise ValidationError("Receipt file is empty", details={"receipt": "empty"})

        key = f"{folder.strip('/')}/{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}_{filename}"
        path = self._path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)

        logger.info("Receipt stored: %s (%d bytes)", key, len(content))
        return f"{self.url_prefix}/{key}"

    def key_for(self, url: str) -> str | None:
        prefix = self.url_prefix + "/"
        if not url or not url.startswith(prefix):
            return None
        return url[len(prefix):]

    def open(self, key: str) -> Path:
        """Return the path of a stored object, or raise NotFoundError."""
        path = self._path_for(key)
        if not path.is_file():
            raise NotFoundError(resource="Receipt", resource_id=key)
        return path

    def delete(self, url: str) -> bool:
        """Remove the object behind ``url``. Returns False if nothing was removed."""
        key = self.key_for(url)
        if key is None:
            return False
        try:
            path = self._path_for(key)
        except NotFoundError:
            return False
        if not path.is_file():
            return False
        path.unlink()
        logger.info("Receipt deleted: %s", key)
        return True
