import logging
import shutil
from pathlib import Path
from typing import Optional

from fastapi import UploadFile

from .config import settings
from .identifiers import IdGenerator, id_generator

logger = logging.getLogger("booking_service")

UPLOAD_URL_PREFIX = "/uploads"


class UploadStorage:
    """
    Writes uploaded files to the public upload directory.
    Files are named `<hex epoch ms><original extension>`.
    """

    def __init__(self, upload_dir: Path, ids: Optional[IdGenerator] = None):
        self.upload_dir = Path(upload_dir)
        self.ids = ids or id_generator

    def save(self, upload: UploadFile) -> str:
        """Stores the file and returns the name it was stored under."""
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        extension = Path(upload.filename or "").suffix
        filename = f"{self.ids.next_timestamp():x}{extension}"

        with open(self.upload_dir / filename, "wb") as f:
            shutil.copyfileobj(upload.file, f)

        logger.info(f"Stored upload '{upload.filename}' as {filename}")
        return filename

    def save_optional(self, upload: Optional[UploadFile]) -> Optional[str]:
        """Reference of the stored file, or None when nothing was uploaded."""
        if upload is None or not upload.filename:
            return None
        return reference_for(self.save(upload))

    def discard(self, name: str) -> None:
        """Removes a stored file, given its name or its /uploads/ reference."""
        path = self.upload_dir / Path(name).name
        if path.exists():
            path.unlink()
            logger.info(f"Discarded upload {path.name}")


def reference_for(filename: str) -> str:
    return f"{UPLOAD_URL_PREFIX}/{filename}"


upload_storage = UploadStorage(settings.UPLOAD_DIR)


def get_upload_storage() -> UploadStorage:
    return upload_storage
