"""
ImageIndex - Immutable mapping from public image identifiers to remote paths.
"""

import logging
from collections import Counter
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from .errors import ImageNotFound
from .smb_client import SEPARATOR, normalize_root


@dataclass(frozen=True)
class ImageEntry:
    """
    One indexed image.

    Attributes:
        id: Public identifier, the base filename unless it collides
        remote_path: Share-relative path of the image, never sent to clients
    """
    id: str
    remote_path: str

    @property
    def filename(self) -> str:
        return base_name(self.remote_path)

    @property
    def extension(self) -> str:
        dot = self.filename.rfind('.')
        return self.filename[dot:] if dot > 0 else ''


def base_name(remote_path: str) -> str:
    """Name component of a remote path."""
    return remote_path.rsplit(SEPARATOR, 1)[-1]


def relative_id(remote_path: str, root: str) -> str:
    """Path of remote_path below root, with '/' separators."""
    if root and remote_path.startswith(root + SEPARATOR):
        remote_path = remote_path[len(root) + 1:]
    return remote_path.replace(SEPARATOR, '/')


class ImageIndex:
    """
    Read-only index built once from the indexer output.

    A base filename found once is its own identifier. Base filenames found
    more than once are identified by their path below the walk root instead
    (e.g. '2019/a.jpg' and '2020/a.jpg'), and looking up the bare name
    resolves to the first of them in walk order.
    """

    def __init__(
        self,
        entries: Iterable[ImageEntry] = (),
        aliases: Optional[Dict[str, str]] = None
    ):
        self._entries: Tuple[ImageEntry, ...] = tuple(entries)
        self._by_id: Dict[str, ImageEntry] = {}
        for entry in self._entries:
            if entry.id in self._by_id:
                raise ValueError(f"Duplicate image identifier: {entry.id}")
            self._by_id[entry.id] = entry
        self._aliases: Dict[str, str] = {
            name: target for name, target in (aliases or {}).items()
            if name not in self._by_id
        }

    @classmethod
    def from_paths(
        cls,
        paths: Iterable[str],
        root: str = '',
        logger: Optional[logging.Logger] = None
    ) -> 'ImageIndex':
        """
        Build an index from remote paths in walk order.

        Args:
            paths: Remote paths produced by Indexer.walk
            root: The walk root, used to derive identifiers for colliding names
            logger: Optional logger instance
        """
        logger = logger or logging.getLogger(__name__)
        root = normalize_root(root)
        paths = list(paths)
        counts = Counter(base_name(p) for p in paths)

        entries: List[ImageEntry] = []
        aliases: Dict[str, str] = {}
        seen = set()
        for remote_path in paths:
            name = base_name(remote_path)
            if counts[name] == 1:
                image_id = name
            else:
                image_id = relative_id(remote_path, root)
                aliases.setdefault(name, image_id)
            if image_id in seen:
                # The same path listed twice; keep the first
                logger.warning(f"Ignoring repeated path {remote_path}")
                continue
            seen.add(image_id)
            entries.append(ImageEntry(id=image_id, remote_path=remote_path))

        for name, count in counts.items():
            if count > 1:
                # A root-level image keeps the bare name, which wins over the alias
                target = name if name in seen else aliases[name]
                logger.warning(
                    f"{count} images share the filename '{name}'; "
                    f"'{name}' resolves to '{target}'"
                )

        return cls(entries, aliases)

    def lookup(self, image_id: str) -> ImageEntry:
        """
        Resolve an identifier.

        Raises:
            ImageNotFound: the identifier is not in the index
        """
        entry = self._by_id.get(image_id)
        if entry is None:
            target = self._aliases.get(image_id)
            if target is not None:
                entry = self._by_id[target]
        if entry is None:
            raise ImageNotFound(image_id)
        return entry

    def list(self) -> List[str]:
        """Identifiers in index order."""
        return [entry.id for entry in self._entries]

    def __contains__(self, image_id: object) -> bool:
        return image_id in self._by_id or image_id in self._aliases

    def __iter__(self) -> Iterator[ImageEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
