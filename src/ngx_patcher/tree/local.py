import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class LocalFileTree:
    """File tree rooted at a directory on disk."""

    def __init__(self, root: str | Path = ".") -> None:
        self._root = Path(root)

    @property
    def root(self) -> Path:
        return self._root

    def _resolve(self, path: str) -> Path:
        return self._root / path.lstrip("/")

    def read_text(self, path: str) -> str | None:
        try:
            with self._resolve(path).open(encoding="utf-8", newline="") as handle:
                return handle.read()
        except FileNotFoundError:
            return None

    def write_text(self, path: str, content: str) -> None:
        target = self._resolve(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        with target.open("w", encoding="utf-8", newline="") as handle:
            handle.write(content)
        logger.info("Wrote %s", target)

    def exists(self, path: str) -> bool:
        return self._resolve(path).is_file()
