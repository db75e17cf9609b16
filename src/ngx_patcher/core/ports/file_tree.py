from typing import Protocol


class FileTree(Protocol):
    def read_text(self, path: str) -> str | None: ...

    def write_text(self, path: str, content: str) -> None: ...

    def exists(self, path: str) -> bool: ...
