"""Domain value objects for Quantum Studio.

Immutable value objects representing core domain concepts.
"""

from dataclasses import dataclass

SEPARATOR = "/"


@dataclass(frozen=True)
class FilePath:
    """Immutable path to a node in a workspace file tree.

    Represents the hierarchical location of a file or folder as a tuple of
    names from the root down. The root itself is the empty path.

    Example:
        path = FilePath.parse("src/components/Button.tsx")
        path.parent  # src/components
        path.name    # Button.tsx
    """

    segments: tuple[str, ...] = ()

    @classmethod
    def parse(cls, path: str) -> "FilePath":
        """Create a FilePath from a slash-separated string.

        Leading, trailing and doubled separators are ignored, so
        ``"/src//App.tsx/"`` and ``"src/App.tsx"`` are the same path.

        Args:
            path: String path like "src/App.tsx"

        Returns:
            New FilePath with parsed segments
        """
        return cls(segments=tuple(part for part in path.split(SEPARATOR) if part))

    def __str__(self) -> str:
        """Return the path as a slash-separated string."""
        return SEPARATOR.join(self.segments)

    @property
    def parent(self) -> "FilePath":
        """Return the path without its last segment (root stays root)."""
        return FilePath(segments=self.segments[:-1])

    @property
    def name(self) -> str:
        """Return the last segment, or an empty string for the root."""
        if not self.segments:
            return ""
        return self.segments[-1]

    def child(self, name: str) -> "FilePath":
        """Return a new FilePath with an appended segment."""
        return FilePath(segments=self.segments + (name,))

    def is_root(self) -> bool:
        """Return True for the empty (root) path."""
        return not self.segments
