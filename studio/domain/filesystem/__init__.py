"""File system domain - the workspace's virtual file tree.

Key Types:
    FileNode, FolderNode - tree nodes
    FileOperation, FileOperationType - structured changes
    WorkingTree, Resolution - copy-on-write path resolution
    BatchResult, SkippedOperation - applier outcome
    OperationsApplied - published-batch event

Functions:
    resolve, find_node, clone_tree, iter_files - tree access
    apply_operation, apply_operations - the operation applier
"""

from .events import OperationsApplied
from .applier import BatchResult, SkippedOperation, apply_operation, apply_operations
from .models import FileNode, FolderNode, Node, empty_tree
from .operations import FileOperation, FileOperationType
from .tree import Resolution, WorkingTree, as_path, clone_tree, find_node, iter_files, resolve

__all__ = [
    # Models
    "FileNode",
    "FolderNode",
    "Node",
    "empty_tree",
    # Operations
    "FileOperation",
    "FileOperationType",
    # Resolution
    "Resolution",
    "WorkingTree",
    "as_path",
    "resolve",
    "find_node",
    "clone_tree",
    "iter_files",
    # Applier
    "BatchResult",
    "SkippedOperation",
    "apply_operation",
    "apply_operations",
    # Events
    "OperationsApplied",
]
