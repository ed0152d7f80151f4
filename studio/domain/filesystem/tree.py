"""Path resolution over file trees.

Published trees are treated as immutable. Every mutation goes through a
``WorkingTree``: a copy-on-write view that copies only the folders along
the paths it touches and shares every other node with the tree it was
derived from. Committing is just taking ``working.root``.
"""

from collections.abc import Iterator
from dataclasses import dataclass

from studio.domain.filesystem.models import FileNode, FolderNode
from studio.domain.shared import Err, InvalidPath, Ok, PathConflict, PathNotFound, Result
from studio.domain.shared.errors import PathError
from studio.domain.types import FilePath

AnyNode = FileNode | FolderNode


def as_path(path: FilePath | str) -> FilePath:
    """Accept either a FilePath or its string form."""
    if isinstance(path, FilePath):
        return path
    return FilePath.parse(path)


@dataclass(frozen=True)
class Resolution:
    """Where a path lands inside a working tree.

    Attributes:
        parent: The (owned, writable) folder that holds or would hold the node.
        name: Final path segment.
        node: The node currently at that name, or None.
        root: Root of the working tree the parent belongs to.
    """

    parent: FolderNode
    name: str
    node: AnyNode | None
    root: FolderNode


class WorkingTree:
    """Copy-on-write working copy of a folder tree.

    The base tree passed in is never modified. Folders are copied the first
    time a resolution walks through them and are then owned by this working
    tree, so repeated resolutions along the same path copy nothing.
    """

    def __init__(self, base: FolderNode) -> None:
        self._base = base
        self._root: FolderNode | None = None
        # Keyed by id(); values keep the owned folders alive.
        self._owned: dict[int, FolderNode] = {}

    @property
    def root(self) -> FolderNode:
        """Current root: the base tree until the first write."""
        return self._root if self._root is not None else self._base

    def _writable_root(self) -> FolderNode:
        if self._root is None:
            self._root = self._take(self._base)
        return self._root

    def _take(self, folder: FolderNode) -> FolderNode:
        if id(folder) in self._owned:
            return folder
        copy = folder.shallow_copy()
        self._owned[id(copy)] = copy
        return copy

    def resolve(
        self,
        path: FilePath | str,
        create_parents: bool = False,
    ) -> Result[Resolution, PathError]:
        """Resolve a path to its parent folder and final name.

        Walks the names left to right. A missing intermediate folder is
        synthesized when ``create_parents`` is set and reported as
        ``PathNotFound`` otherwise; a file in an intermediate position is a
        ``PathConflict``. The walk is checked before anything is copied, so a
        failed resolution leaves the working tree untouched.

        Args:
            path: Path to resolve.
            create_parents: Synthesize missing intermediate folders.

        Returns:
            Ok(Resolution) or Err(PathError).
        """
        target = as_path(path)
        if target.is_root():
            return Err(InvalidPath(str(target), "The root has no parent"))

        current = self.root
        walked = FilePath()
        for name in target.parent.segments:
            walked = walked.child(name)
            child = current.children.get(name)
            if child is None:
                if not create_parents:
                    return Err(PathNotFound(str(target), f"Missing folder '{walked}'"))
                # Everything below a missing folder is synthesized, nothing can conflict.
                break
            if isinstance(child, FileNode):
                return Err(PathConflict(str(target), f"'{walked}' is a file"))
            current = child

        folder = self._writable_root()
        for name in target.parent.segments:
            child = folder.children.get(name)
            if child is None:
                child = FolderNode()
                self._owned[id(child)] = child
            else:
                child = self._take(child)
            folder.children[name] = child
            folder = child

        return Ok(
            Resolution(
                parent=folder,
                name=target.name,
                node=folder.children.get(target.name),
                root=self.root,
            )
        )

    def detach(self, path: FilePath | str) -> Result[AnyNode, PathError]:
        """Remove the node at ``path`` and return it unchanged."""
        result = self.resolve(path)
        if isinstance(result, Err):
            return result
        resolution = result.value
        if resolution.node is None:
            return Err(PathNotFound(str(as_path(path))))
        del resolution.parent.children[resolution.name]
        return Ok(resolution.node)


def resolve(
    tree: FolderNode,
    path: FilePath | str,
    create_parents: bool = False,
) -> Result[Resolution, PathError]:
    """Resolve ``path`` against a fresh working copy of ``tree``.

    ``tree`` itself is never mutated; the resolution's ``root`` is the working
    copy the caller may commit.
    """
    return WorkingTree(tree).resolve(path, create_parents=create_parents)


def find_node(tree: FolderNode, path: FilePath | str) -> AnyNode | None:
    """Read-only lookup. The empty path returns the root itself."""
    current: AnyNode = tree
    for name in as_path(path).segments:
        if not isinstance(current, FolderNode):
            return None
        child = current.children.get(name)
        if child is None:
            return None
        current = child
    return current


def clone_tree(tree: FolderNode) -> FolderNode:
    """Deep clone a tree; no node is shared with the original."""
    return tree.model_copy(deep=True)


def iter_files(tree: FolderNode) -> Iterator[tuple[FilePath, FileNode]]:
    """Yield every file with its path, depth-first, children sorted by name."""

    def walk(folder: FolderNode, prefix: FilePath) -> Iterator[tuple[FilePath, FileNode]]:
        for name in sorted(folder.children):
            child = folder.children[name]
            if isinstance(child, FileNode):
                yield prefix.child(name), child
            else:
                yield from walk(child, prefix.child(name))

    yield from walk(tree, FilePath())
