"""Operation applier.

Applies a batch of file operations to a tree, best effort. Every operation
runs against its own copy-on-write working tree derived from the result of
the previous one, so a failing operation is dropped whole: it leaves no
half-created folders behind and never aborts the rest of the batch.
"""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from studio.domain.filesystem.models import FileNode, FolderNode
from studio.domain.filesystem.operations import FileOperation, FileOperationType
from studio.domain.filesystem.tree import WorkingTree
from studio.domain.shared import Err, InvalidPath, Ok, PathConflict, Result
from studio.domain.shared.errors import PathError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SkippedOperation:
    """An operation that could not be applied, with the reason."""

    operation: FileOperation
    error: PathError

    @property
    def reason(self) -> str:
        return str(self.error)


@dataclass
class BatchResult:
    """Outcome of applying a batch.

    Attributes:
        tree: The new tree. The input tree is never modified.
        applied: Operations that took effect (no-ops included).
        skipped: Operations that failed, in batch order.
    """

    tree: FolderNode
    applied: list[FileOperation] = field(default_factory=list)
    skipped: list[SkippedOperation] = field(default_factory=list)


Handler = Callable[[WorkingTree, FileOperation], Result[None, PathError]]


def _write_file(working: WorkingTree, op: FileOperation) -> Result[None, PathError]:
    result = working.resolve(op.path, create_parents=True)
    if isinstance(result, Err):
        return result
    resolution = result.value
    resolution.parent.children[resolution.name] = FileNode(content=op.content or "")
    return Ok(None)


def _create_folder(working: WorkingTree, op: FileOperation) -> Result[None, PathError]:
    result = working.resolve(op.path, create_parents=True)
    if isinstance(result, Err):
        return result
    resolution = result.value
    if isinstance(resolution.node, FolderNode):
        return Ok(None)
    if isinstance(resolution.node, FileNode):
        return Err(PathConflict(op.path, "A file already exists at"))
    resolution.parent.children[resolution.name] = FolderNode()
    return Ok(None)


def _delete(working: WorkingTree, op: FileOperation) -> Result[None, PathError]:
    result = working.resolve(op.path)
    if isinstance(result, Err):
        if isinstance(result.error, InvalidPath):
            return result
        # Nothing there to delete.
        return Ok(None)
    resolution = result.value
    if resolution.node is not None:
        del resolution.parent.children[resolution.name]
    return Ok(None)


def _rename(working: WorkingTree, op: FileOperation) -> Result[None, PathError]:
    if not op.new_path:
        return Err(InvalidPath(op.path, "Missing newPath for rename of"))
    detached = working.detach(op.path)
    if isinstance(detached, Err):
        return detached
    destination = working.resolve(op.new_path, create_parents=True)
    if isinstance(destination, Err):
        return destination
    resolution = destination.value
    resolution.parent.children[resolution.name] = detached.value
    return Ok(None)


_HANDLERS: dict[FileOperationType, Handler] = {
    FileOperationType.CREATE_FILE: _write_file,
    FileOperationType.UPDATE_FILE: _write_file,
    FileOperationType.CREATE_FOLDER: _create_folder,
    FileOperationType.DELETE_FILE: _delete,
    FileOperationType.DELETE_FOLDER: _delete,
    FileOperationType.RENAME_FILE: _rename,
    FileOperationType.RENAME_FOLDER: _rename,
}

_unhandled = set(FileOperationType) - set(_HANDLERS)
if _unhandled:
    raise RuntimeError(f"No applier handler for: {sorted(t.value for t in _unhandled)}")


def apply_operation(tree: FolderNode, op: FileOperation) -> Result[FolderNode, PathError]:
    """Apply one operation; on failure the input tree is returned untouched."""
    working = WorkingTree(tree)
    result = _HANDLERS[op.operation](working, op)
    if isinstance(result, Err):
        return result
    return Ok(working.root)


def apply_operations(tree: FolderNode, batch: Sequence[FileOperation]) -> BatchResult:
    """Apply a batch of operations in list order.

    Args:
        tree: The published tree to start from. Not modified.
        batch: Operations to apply.

    Returns:
        BatchResult with the new tree and per-operation outcomes.
    """
    outcome = BatchResult(tree=tree)
    for op in batch:
        result = apply_operation(outcome.tree, op)
        if isinstance(result, Err):
            logger.warning(f"Skipping {op.summary()}: {result.error}")
            outcome.skipped.append(SkippedOperation(operation=op, error=result.error))
            continue
        outcome.tree = result.value
        outcome.applied.append(op)
    return outcome
