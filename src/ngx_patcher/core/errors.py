class PatchError(Exception):
    """Base class for failures surfaced to the caller of a patch request."""


class ParseError(PatchError):
    def __init__(self, path: str, line: int, column: int) -> None:
        self.path = path
        self.line = line
        self.column = column
        super().__init__(f"Cannot parse {path}: syntax error at line {line}, column {column}")


class TargetFileNotFoundError(PatchError):
    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"File not found: {path}")


class OverlappingEditsError(PatchError):
    def __init__(self, first: tuple[int, int], second: tuple[int, int]) -> None:
        self.first = first
        self.second = second
        super().__init__(f"Edits overlap: [{first[0]}, {first[1]}) and [{second[0]}, {second[1]})")
