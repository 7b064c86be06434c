# qrforge/core/storage.py
import os
import time
from pathlib import Path

import shortuuid

from .config import settings
from .errors import CollaboratorError
from .log import get_logger

log = get_logger("storage")

PUBLIC_PREFIX = "/qr-images"


def new_image_name(ext: str = "png") -> str:
    """Device ids are untrusted, so they never end up in file names."""
    return f"qr_{int(time.time() * 1000)}_{shortuuid.uuid()}.{ext}"


class LocalBlobStorage:
    """Key → bytes store on local disk, served by the ``/qr-images`` static mount."""

    def __init__(self, root: str | os.PathLike | None = None, base_url: str | None = None):
        self.root = Path(root or settings.QR_SAVE_DIR).resolve()
        self.base_url = (base_url or settings.PUBLIC_BASE_URL).rstrip("/")

    def ensure_root(self):
        self.root.mkdir(parents=True, exist_ok=True)

    def public_url(self, name: str) -> str:
        return f"{self.base_url}{PUBLIC_PREFIX}/{name}"

    def upload(self, name: str, data: bytes, content_type: str = "image/png") -> str:
        if Path(name).name != name:
            raise CollaboratorError(f"Invalid object name: {name}")
        target = self.root / name
        try:
            self.ensure_root()
            # "x" mode: an existing object is never replaced
            with open(target, "xb") as fh:
                fh.write(data)
        except OSError as e:
            raise CollaboratorError(f"Upload failed: {e}") from e
        log.info("[UPLOAD] %s (%s, %d bytes)", name, content_type, len(data))
        return self.public_url(name)


def get_storage() -> LocalBlobStorage:
    return LocalBlobStorage()
