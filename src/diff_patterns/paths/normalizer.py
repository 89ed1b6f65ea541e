"""PathNormalizer: converts raw property paths into structural keys.

Many raw paths map to one normalized path; the normalized path is the
primary grouping key of every analyzer.  Handles:
- Array indices (e.g. "Results[3].Score" -> "Results[*].Score")
- XML namespace prefixes (e.g. "soap:Body.Item" -> "Body.Item")
- Compiler backing fields (e.g. "<Name>k__BackingField" -> "Name")
- Collection accessor boilerplate
  (e.g. "Items.System.Collections.IList.Item[2]" -> "Items[*]")

Normalization is total (empty input yields empty output), pure, and
idempotent: ``normalize(normalize(p)) == normalize(p)``.
"""

from __future__ import annotations

import logging
import re

__all__ = ["WILDCARD", "PathNormalizer", "normalize_path"]

logger = logging.getLogger(__name__)

WILDCARD = "[*]"

# Compiled regex patterns (module-level, compiled once)

# Numeric array index, e.g. "[12]"
_INDEX = re.compile(r"\[\d+\]")

# XML namespace prefix, e.g. "soap:" in "soap:Envelope"
_NAMESPACE_PREFIX = re.compile(r"\w+:")

# Auto-property backing field, e.g. "<Status>k__BackingField"
_BACKING_FIELD = re.compile(r"<(\w+)>k__BackingField")

# Collection indexer boilerplate emitted by reflection-based comparators.
# The specific IList forms are listed first; the last pattern catches any
# other System.Collections interface.
_COLLECTION_ACCESSORS = (
    re.compile(r"\.System\.Collections\.IList\.Item\["),
    re.compile(r"\.System\.Collections\.Generic\.IList`1\.Item\["),
    re.compile(r"\.System\.Collections\.[^.]+\.Item\["),
)


class PathNormalizer:
    """Normalizes raw property paths to wildcard structural keys.

    Uses a four-pass regex pipeline, repeated until the path stops changing.
    A single pipeline run is enough for every real comparator path; the
    repetition only matters for degenerate inputs such as ``"[ns:5]"``, where
    removing the namespace uncovers a fresh numeric index.

    Stateless; a single instance may be shared freely.

    Example usage:
        normalizer = PathNormalizer()
        normalizer.normalize("Results[0].Score")             # "Results[*].Score"
        normalizer.normalize("<Status>k__BackingField")      # "Status"
        normalizer.normalize("Items.System.Collections.IList.Item[1]")  # "Items[*]"
    """

    def normalize(self, raw_path: str | None) -> str:
        """Normalize a raw property path.

        Args:
            raw_path: Property path as reported by the comparator.  None and
                the empty string both yield ``""``.

        Returns:
            The normalized path.
        """
        if not raw_path:
            return ""

        previous = None
        s = raw_path
        while s != previous:
            previous = s
            s = self._run_pipeline(s)

        if s != raw_path and ".System.Collections." in raw_path:
            logger.debug("Normalized property path: %r -> %r", raw_path, s)

        return s

    def _run_pipeline(self, path: str) -> str:
        """Apply the four normalization passes once.

        Processing pipeline (applied in order):
        1. Replace every numeric index with ``[*]``.
        2. Strip XML namespace prefixes.
        3. Unwrap backing-field notation to the bare property name.
        4. Collapse collection accessor boilerplate into plain ``[`` so the
           index written in pass 1 attaches to the collection itself.
        """
        # Pass 1: wildcard array indices
        s = _INDEX.sub(WILDCARD, path)

        # Pass 2: drop namespace prefixes
        s = _NAMESPACE_PREFIX.sub("", s)

        # Pass 3: "<Name>k__BackingField" -> "Name"
        s = _BACKING_FIELD.sub(r"\1", s)

        # Pass 4: ".System.Collections.IList.Item[*]" -> "[*]"
        for accessor in _COLLECTION_ACCESSORS:
            s = accessor.sub("[", s)

        return s


# Module-level singleton; PathNormalizer is stateless, safe to share.
_normalizer = PathNormalizer()


def normalize_path(raw_path: str | None) -> str:
    """Normalize *raw_path* with the shared ``PathNormalizer``."""
    return _normalizer.normalize(raw_path)
