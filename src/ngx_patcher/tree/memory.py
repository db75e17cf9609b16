import posixpath


def _normalize(path: str) -> str:
    return posixpath.normpath("/" + path.replace("\\", "/").lstrip("/"))


class InMemoryFileTree:
    """Dictionary-backed file tree; paths are normalised to absolute POSIX form."""

    def __init__(self, files: dict[str, str] | None = None) -> None:
        self.files: dict[str, str] = {}
        self.writes: list[str] = []
        for path, content in (files or {}).items():
            self.files[_normalize(path)] = content

    def read_text(self, path: str) -> str | None:
        return self.files.get(_normalize(path))

    def write_text(self, path: str, content: str) -> None:
        normalized = _normalize(path)
        self.files[normalized] = content
        self.writes.append(normalized)

    def exists(self, path: str) -> bool:
        return _normalize(path) in self.files
