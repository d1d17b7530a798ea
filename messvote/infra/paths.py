from pathlib import Path

from messvote.utilities.config import DATA_DIR as _CONFIG_DATA_DIR, MEDIA_DIR as _CONFIG_MEDIA_DIR

# Centralized paths for data files (single source of truth)
DATA_DIR = _CONFIG_DATA_DIR.resolve()
MEDIA_DIR = _CONFIG_MEDIA_DIR.resolve()


def collection_file(data_dir: Path, collection: str) -> Path:
    """One JSON file per document collection."""
    return Path(data_dir) / f"{collection}.json"


__all__ = ['DATA_DIR', 'MEDIA_DIR', 'collection_file']
