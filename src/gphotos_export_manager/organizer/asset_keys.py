"""Asset key normalization.

A takeout spreads one logical photo over several files: the original
(IMG_1.jpg), an edited variant (IMG_1-bearbeitet.jpg) and the JSON sidecar
(IMG_1.jpg.json). All of them reduce to the same asset key (IMG_1) by
removing every extension seen in the surrounding file set and the edited
marker.
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

SIDECAR_MARKER = ".json"


def file_extension(file_name: str) -> Optional[str]:
    """Return the text after the last dot of a file name, or None."""
    if '.' not in file_name:
        return None
    extension = file_name.rsplit('.', 1)[1]
    return extension or None


def is_sidecar(file_name: str) -> bool:
    """Sidecars are recognized by the literal '.json' anywhere in the name."""
    return SIDECAR_MARKER in file_name


@dataclass(frozen=True)
class AssetKeyNormalizer:
    """Reduces file names to asset keys for one file set.

    Attributes:
        extensions: Extensions to strip, longest first
        edited_suffix: Marker of edited variants (empty disables it)
    """
    extensions: Tuple[str, ...]
    edited_suffix: str = ""

    @classmethod
    def from_file_names(cls, file_names: Iterable[str], edited_suffix: str) -> "AssetKeyNormalizer":
        """Build a normalizer from the extensions present in a file set."""
        found = {ext for ext in map(file_extension, file_names) if ext is not None}
        # Longest first so overlapping extensions strip the same way every run
        ordered = tuple(sorted(found, key=lambda ext: (-len(ext), ext)))
        return cls(extensions=ordered, edited_suffix=edited_suffix)

    def _strip_once(self, name: str, with_suffix: bool) -> str:
        for extension in self.extensions:
            name = name.replace(f".{extension}", "")
        if with_suffix and self.edited_suffix:
            name = name.replace(self.edited_suffix, "")
        return name

    def _strip(self, name: str, with_suffix: bool) -> str:
        # Removing one marker can splice another one together, so repeat
        # until nothing changes.
        while True:
            stripped = self._strip_once(name, with_suffix)
            if stripped == name:
                return stripped
            name = stripped

    def strip_extensions(self, file_name: str) -> str:
        """Remove every known extension, keeping the edited marker."""
        return self._strip(file_name, with_suffix=False)

    def is_edited(self, file_name: str) -> bool:
        """True if the extension-stripped name carries the edited marker."""
        return bool(self.edited_suffix) and self.edited_suffix in self.strip_extensions(file_name)

    def normalize(self, file_name: str) -> str:
        """Compute the asset key of a file name."""
        return self._strip(file_name, with_suffix=True)
