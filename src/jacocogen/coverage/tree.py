"""Directory tree over covered files.

The root is the deepest directory shared by every file. Every directory
between the root and a file gets a DirectoryNode, so a directory may hold
files, subdirectories, or both. Children are ordered by name.
"""

from collections.abc import Iterable

from jacocogen.coverage.models import DirectoryNode, FileNode


def _split(path: str) -> list[str]:
    return path.replace("\\", "/").split("/")


def _common_prefix(dirs: list[list[str]]) -> list[str]:
    if not dirs:
        return []
    prefix = dirs[0]
    for parts in dirs[1:]:
        n = 0
        while n < len(prefix) and n < len(parts) and prefix[n] == parts[n]:
            n += 1
        prefix = prefix[:n]
    return prefix


class TreeSummarizer:
    """Builds the DirectoryNode/FileNode tree for a set of file paths."""

    def __init__(self) -> None:
        self._paths: list[str] = []

    def add_file(self, path: str) -> None:
        self._paths.append(path)

    def get_tree(self) -> DirectoryNode:
        dir_parts = {path: _split(path)[:-1] for path in self._paths}
        prefix = _common_prefix(list(dir_parts.values()))

        root = DirectoryNode(path="/".join(prefix), relative_name="")
        index: dict[tuple[str, ...], DirectoryNode] = {(): root}

        for path in sorted(self._paths):
            rel_parts = dir_parts[path][len(prefix) :]
            node = root
            for depth in range(1, len(rel_parts) + 1):
                key = tuple(rel_parts[:depth])
                child = index.get(key)
                if child is None:
                    child = DirectoryNode(
                        path="/".join([*prefix, *key]),
                        relative_name="/".join(key) + "/",
                    )
                    node.children.append(child)
                    index[key] = child
                node = child
            file_name = _split(path)[-1]
            node.children.append(
                FileNode(path=path, relative_name="/".join([*rel_parts, file_name]))
            )

        for node in index.values():
            node.children.sort(key=lambda c: c.relative_name)
        return root


def summarize(paths: Iterable[str]) -> DirectoryNode:
    """Convenience wrapper: tree for ``paths``."""
    summarizer = TreeSummarizer()
    for path in paths:
        summarizer.add_file(path)
    return summarizer.get_tree()
