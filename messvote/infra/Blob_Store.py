"""Local blob storage for menu images and complaint photos.

Files live under the media directory and are served by the API at MEDIA_URL.
"""
import logging
import os
import re
import uuid
from pathlib import Path
from typing import Optional

from messvote.utilities.config import MEDIA_URL
from messvote.utilities.errors import NonFatalCleanupError, TransientStoreError

logger = logging.getLogger(__name__)

_SAFE_NAME = re.compile(r'[^A-Za-z0-9._-]+')


def _safe_filename(filename: str) -> str:
    name = _SAFE_NAME.sub('_', os.path.basename(filename or 'upload')).strip('._')
    return name or 'upload'


class LocalBlobStore:
    def __init__(self, root_dir: Path, base_url: str = MEDIA_URL):
        self.root_dir = Path(root_dir)
        self.root_dir.mkdir(parents=True, exist_ok=True)
        self.base_url = base_url.rstrip('/')

    def upload(self, folder: str, filename: str, content: bytes) -> str:
        """Store `content` and return its public URL."""
        target_dir = self.root_dir / folder
        stored_name = f"{uuid.uuid4().hex[:12]}_{_safe_filename(filename)}"
        try:
            target_dir.mkdir(parents=True, exist_ok=True)
            with open(target_dir / stored_name, 'wb') as f:
                f.write(content)
        except OSError as e:
            logger.error(f"Blob upload failed for {folder}/{stored_name}: {e}")
            raise TransientStoreError("Image upload failed")
        return self.get_url(f"{folder}/{stored_name}")

    def get_url(self, relative_path: str) -> str:
        return f"{self.base_url}/{relative_path.lstrip('/')}"

    def _path_for(self, url: str) -> Optional[Path]:
        if not url or not url.startswith(self.base_url + '/'):
            return None
        relative = url[len(self.base_url) + 1:]
        path = (self.root_dir / relative).resolve()
        if self.root_dir.resolve() not in path.parents:
            return None
        return path

    def exists(self, url: str) -> bool:
        path = self._path_for(url)
        return path is not None and path.exists()

    def delete(self, url: str) -> bool:
        """Remove the blob behind `url`. Foreign URLs are ignored (returns False)."""
        path = self._path_for(url)
        if path is None or not path.exists():
            return False
        try:
            path.unlink()
        except OSError as e:
            raise NonFatalCleanupError(f"Could not delete {url}: {e}")
        return True
