"""Artifact sets copied into the snapshot working copy."""

from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Iterator, List, Tuple


def _confine(destination: str, subtree: str) -> PurePosixPath:
    """Validate that destination is a relative path inside subtree."""
    path = PurePosixPath(destination)
    if path.is_absolute() or '..' in path.parts:
        raise ValueError(f"Artifact destination must be a plain relative path: {destination}")
    if not path.parts or path.parts[0] != subtree or len(path.parts) < 2:
        raise ValueError(
            f"Artifact destination {destination} is outside the '{subtree}' subtree"
        )
    return path


@dataclass
class ArtifactSet:
    """Ordered (source, destination) pairs confined to one top-level directory.

    Destinations are relative to the working copy root and must live under
    `subtree`, so unrelated content of the snapshot repository is never
    overwritten.
    """
    subtree: str
    entries: List[Tuple[Path, PurePosixPath]] = field(default_factory=list)

    def add(self, source: Path, destination: str) -> None:
        """Append one file to the set.

        Raises:
            ValueError: If destination escapes the subtree
        """
        self.entries.append((Path(source), _confine(destination, self.subtree)))

    def __iter__(self) -> Iterator[Tuple[Path, PurePosixPath]]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    @classmethod
    def from_directory(cls, root: Path, subtree: str) -> 'ArtifactSet':
        """Collect every file under root/subtree, keeping its relative path.

        Args:
            root: Build output directory (e.g. a local Maven repository)
            subtree: Top-level directory to include, like "org"

        Returns:
            ArtifactSet sorted by destination path

        Raises:
            ValueError: If root does not exist
        """
        root = Path(root)
        if not root.is_dir():
            raise ValueError(f"Artifact root does not exist: {root}")

        artifacts = cls(subtree=subtree)
        base = root / subtree
        if not base.is_dir():
            return artifacts

        for source in sorted(p for p in base.rglob('*') if p.is_file()):
            artifacts.add(source, source.relative_to(root).as_posix())
        return artifacts
