"""SemanticGrouper: groups differences by what they mean rather than where they are.

Each difference is tested, in a fixed priority order, against:

1. Named predicates over the normalized path and the value types:
   Status Changes, ID Value Changes, Timestamp/Date Changes,
   Score/Value Adjustments, Name/Description Changes,
   Collection Order Changes, Tag Modifications.
2. Configured document sections: a path containing any keyword of a section
   joins ``"<Section> Changes"``.
3. Value shapes: GUIDs on both sides (Identifier Replacements), path or URL
   separators on both sides (URL/Path Changes), dotted version numbers on
   both sides (Version Changes).

The first match wins, so no difference appears in two groups.  Differences
matching nothing stay ungrouped.  The predicate order is part of the
contract: a path matching both the status and the tag predicates is always a
Status Change.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable

from diff_patterns.cache import NormalizationCache
from diff_patterns.config import AnalysisConfig
from diff_patterns.models import Difference, FolderResult
from diff_patterns.paths.segments import has_index
from diff_patterns.result import SemanticDifferenceAnalysis, SemanticGroup
from diff_patterns.values import is_numeric, is_temporal

__all__ = ["SemanticGrouper", "confidence_level"]

logger = logging.getLogger(__name__)

# GUID with or without dashes, e.g. "3f2504e0-4f89-11d3-9a0c-0305e82c3301"
_GUID = re.compile(r"[0-9a-fA-F]{8}-?([0-9a-fA-F]{4}-?){3}[0-9a-fA-F]{12}")

# Dotted version number, e.g. "1.2" or "10.4.3"
_VERSION = re.compile(r"\d+\.\d+")

_Predicate = Callable[[str, Difference], bool]


# ---------------------------------------------------------------------------
# Named predicates (path is the normalized path)
# ---------------------------------------------------------------------------


def _is_status(path: str, diff: Difference) -> bool:
    return path.endswith("Status") or ".Status." in path


def _is_id(path: str, diff: Difference) -> bool:
    return path.endswith("Id") or ".Id." in path


def _is_date(path: str, diff: Difference) -> bool:
    if any(word in path for word in ("Date", "Time", "Generated")):
        return True
    return is_temporal(diff.old_value) or is_temporal(diff.new_value)


def _is_score(path: str, diff: Difference) -> bool:
    if any(word in path for word in ("Score", "Value", "Amount", "Count")):
        return True
    return is_numeric(diff.old_value) and is_numeric(diff.new_value)


def _is_name(path: str, diff: Difference) -> bool:
    return any(word in path for word in ("Name", "Description", "Title", "Label"))


def _is_collection_order(path: str, diff: Difference) -> bool:
    """Same rendered value at an indexed path: the element moved, the value did not."""
    if not has_index(path) or diff.old_value is None or diff.new_value is None:
        return False
    return str(diff.old_value) == str(diff.new_value)


def _is_tag(path: str, diff: Difference) -> bool:
    return any(word in path for word in ("Tag", "Category", "Label"))


_SEMANTIC_PREDICATES: tuple[tuple[str, str, _Predicate], ...] = (
    ("Status Changes", "Changes to status values such as Success, Warning, Error", _is_status),
    ("ID Value Changes", "Changes to identifier values", _is_id),
    ("Timestamp/Date Changes", "Changes to dates, times, or timestamps", _is_date),
    (
        "Score/Value Adjustments",
        "Changes to numeric scores, counts, or measurements",
        _is_score,
    ),
    (
        "Name/Description Changes",
        "Changes to names, descriptions, or text content",
        _is_name,
    ),
    (
        "Collection Order Changes",
        "Changes in the order of items within collections",
        _is_collection_order,
    ),
    ("Tag Modifications", "Changes to tags, categories, or labels", _is_tag),
)


def _value_shape_group(diff: Difference) -> str | None:
    """Group name suggested by the rendered values alone, if any."""
    if diff.old_value is None or diff.new_value is None:
        return None
    old, new = str(diff.old_value), str(diff.new_value)
    if _GUID.search(old) and _GUID.search(new):
        return "Identifier Replacements"
    if "/" in old and "/" in new:
        # "://" contains "/", so URLs are covered too
        return "URL/Path Changes"
    if _VERSION.search(old) and _VERSION.search(new):
        return "Version Changes"
    return None


def confidence_level(related_properties: int, affected_files: int) -> int:
    """``min(100, 50 + 5*min(10, properties) + 5*min(5, files))``."""
    return min(100, 50 + 5 * min(10, related_properties) + 5 * min(5, affected_files))


class SemanticGrouper:
    """Builds semantic groups for every difference of a folder.

    Args:
        config: Supplies ``document_sections``.  Defaults to
            ``AnalysisConfig()`` (no section groups).
    """

    def __init__(self, config: AnalysisConfig | None = None) -> None:
        self._config = config if config is not None else AnalysisConfig()

    def group_name_for(self, diff: Difference, normalized_path: str) -> str | None:
        """Name of the group *diff* belongs to, or None when nothing matches."""
        for name, _, predicate in _SEMANTIC_PREDICATES:
            if predicate(normalized_path, diff):
                return name

        for section, keywords in self._config.document_sections:
            if any(keyword in normalized_path for keyword in keywords):
                return f"{section} Changes"

        return _value_shape_group(diff)

    def analyze(self, folder: FolderResult) -> SemanticDifferenceAnalysis:
        pairs = folder.pairs_with_differences
        logger.info("Starting semantic grouping of %d file pairs", len(pairs))

        groups = self._empty_groups()
        cache = NormalizationCache(max_size=self._config.path_cache_size)
        total = 0
        for pair in pairs:
            file_id = pair.identifier
            for diff in pair.differences or ():
                total += 1
                path = cache.normalize(diff.property_path)
                name = self.group_name_for(diff, path)
                if name is None:
                    continue
                if name not in groups:
                    groups[name] = SemanticGroup(
                        name=name,
                        description=f"Changes related to {name.lower()}",
                    )
                groups[name].add(diff, file_id, path)

        populated = [group for group in groups.values() if group.differences]
        for group in populated:
            group.confidence_level = confidence_level(
                len(group.related_properties), len(group.affected_files)
            )
            logger.debug(
                "Semantic group %r: %d differences, confidence %d",
                group.name,
                group.difference_count,
                group.confidence_level,
            )
        populated.sort(key=lambda g: (g.confidence_level, g.difference_count), reverse=True)

        analysis = SemanticDifferenceAnalysis(semantic_groups=populated, total_differences=total)
        logger.info(
            "Semantic grouping complete: %d groups, %d of %d differences grouped",
            len(populated),
            analysis.categorized_differences,
            total,
        )
        return analysis

    def _empty_groups(self) -> dict[str, SemanticGroup]:
        """Predicate groups first, then section groups, in their configured order."""
        groups = {
            name: SemanticGroup(name=name, description=description)
            for name, description, _ in _SEMANTIC_PREDICATES
        }
        for section, _ in self._config.document_sections:
            name = f"{section} Changes"
            groups.setdefault(
                name, SemanticGroup(name=name, description=f"Changes that affect {section.lower()}")
            )
        return groups
