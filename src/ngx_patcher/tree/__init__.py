from ngx_patcher.tree.local import LocalFileTree
from ngx_patcher.tree.memory import InMemoryFileTree

__all__ = [
    "InMemoryFileTree",
    "LocalFileTree",
]
