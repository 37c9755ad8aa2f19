"""File-based build cache with fingerprint invalidation.

Cache structure:
    .cache/
    ├── .gitignore
    └── fingerprints.json    # output relpath -> SHA-256 of the written payload

An output is considered up to date when its fingerprint matches the cached
one and the file still exists in the output directory.
"""

import hashlib
import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def compute_fingerprint(payload: str) -> str:
    """Compute a content hash for a serialized output.

    Args:
        payload: Serialized output file content

    Returns:
        SHA-256 hex digest of the payload
    """
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


class BuildCache:
    """Fingerprints of previously written build outputs.

    Fingerprints are loaded lazily and persisted with save().
    """

    _GITIGNORE_CONTENT = "# Ignore everything in this directory\n*\n"
    _FINGERPRINTS_FILENAME = "fingerprints.json"

    def __init__(self, cache_dir: Path) -> None:
        """Initialize cache with directory path.

        Args:
            cache_dir: Root directory for cache files (e.g., .cache/)
        """
        self._cache_dir = cache_dir
        self._fingerprints_path = cache_dir / self._FINGERPRINTS_FILENAME
        self._fingerprints: dict[str, str] | None = None

    @property
    def cache_dir(self) -> Path:
        """Root cache directory."""
        return self._cache_dir

    def _ensure_cache_dir(self) -> None:
        """Create cache directory with .gitignore if it doesn't exist."""
        if not self._cache_dir.exists():
            self._cache_dir.mkdir(parents=True, exist_ok=True)
            gitignore_path = self._cache_dir / ".gitignore"
            gitignore_path.write_text(self._GITIGNORE_CONTENT, encoding="utf-8")

    def _load(self) -> dict[str, str]:
        if self._fingerprints is None:
            self._fingerprints = self._read_fingerprints()
        return self._fingerprints

    def is_fresh(self, relpath: str, fingerprint: str, output_path: Path) -> bool:
        """Check whether an output can be skipped.

        Args:
            relpath: Output path relative to the output directory
            fingerprint: Fingerprint of the payload about to be written
            output_path: Absolute output path

        Returns:
            True if the cached fingerprint matches and the output exists
        """
        return self._load().get(relpath) == fingerprint and output_path.exists()

    def set(self, relpath: str, fingerprint: str) -> None:
        """Record the fingerprint of a written output."""
        self._load()[relpath] = fingerprint

    def relpaths(self) -> list[str]:
        """Outputs with a recorded fingerprint, sorted."""
        return sorted(self._load())

    def invalidate(self, relpath: str) -> None:
        """Forget one output."""
        self._load().pop(relpath, None)

    def clear(self) -> None:
        """Remove all cached fingerprints."""
        self._fingerprints = {}
        if self._fingerprints_path.exists():
            self._fingerprints_path.unlink()

    def save(self) -> None:
        """Persist fingerprints to disk."""
        self._ensure_cache_dir()
        self._fingerprints_path.write_text(
            json.dumps(self._load(), indent=2, sort_keys=True),
            encoding="utf-8",
        )

    def _read_fingerprints(self) -> dict[str, str]:
        """Read and validate the fingerprints file.

        Returns:
            Fingerprints, empty when missing or unreadable
        """
        try:
            data = json.loads(self._fingerprints_path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, json.JSONDecodeError):
            logger.warning(f"Ignoring unreadable build cache {self._fingerprints_path}")
            return {}

        if not isinstance(data, dict):
            return {}

        return {key: value for key, value in data.items() if isinstance(key, str) and isinstance(value, str)}
