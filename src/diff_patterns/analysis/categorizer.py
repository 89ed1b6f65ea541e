"""DifferenceCategorizer: assigns a category to a single difference.

Two taxonomies are offered:

- ``categorize`` decides by value shape only (absent side, numbers, dates,
  text, booleans, collection structure).
- ``categorize_enhanced`` first looks at collection structure, then at the
  field name (``Id``, ``Status``, ``CreatedDate``...), then at XML attribute
  markers, and finally falls back to value shape.

Both are pure functions of one difference.  First matching rule wins.
"""

from __future__ import annotations

import re
from typing import Any

from diff_patterns.analysis.categories import DifferenceCategory, EnhancedDifferenceCategory
from diff_patterns.models import Difference
from diff_patterns.paths.segments import ends_with_index, has_index, last_segment
from diff_patterns.values import (
    is_boolean,
    is_numeric,
    is_temporal,
    is_text,
    parse_number,
)

__all__ = [
    "DifferenceCategorizer",
    "categorize",
    "categorize_enhanced",
    "infer_value_change_category",
]

# Field-name rules, matched case-insensitively against the last path segment.
# Order matters: "flag" is a Status field before it is a Boolean one.
_FIELD_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("Identifier", re.compile(r"(^|\.)(id|guid|uuid|key|identifier|code)$", re.IGNORECASE)),
    ("Name", re.compile(r"(^|\.)(name|title|label|caption|heading)$", re.IGNORECASE)),
    (
        "Description",
        re.compile(r"(^|\.)(desc|description|summary|note|comment|text)$", re.IGNORECASE),
    ),
    ("Status", re.compile(r"(^|\.)(status|state|condition|flag)$", re.IGNORECASE)),
    (
        "Date",
        re.compile(
            r"(^|\.)(date|time|timestamp|created|modified|updated|datetime)$",
            re.IGNORECASE,
        ),
    ),
    ("Quantity", re.compile(r"(^|\.)(count|quantity|amount|number|total)$", re.IGNORECASE)),
    ("Value", re.compile(r"(^|\.)(value|price|cost|fee|rate|score)$", re.IGNORECASE)),
    (
        "Boolean",
        re.compile(r"(^|\.)(is|has|can|should|enabled|active|flag)$", re.IGNORECASE),
    ),
)

_FIELD_TYPE_CATEGORIES: dict[str, EnhancedDifferenceCategory] = {
    "Identifier": EnhancedDifferenceCategory.IDENTIFIER_MISMATCH,
    "Name": EnhancedDifferenceCategory.NAME_OR_LABEL_CHANGE,
    "Description": EnhancedDifferenceCategory.NAME_OR_LABEL_CHANGE,
    "Status": EnhancedDifferenceCategory.STATUS_VALUE_CHANGE,
    "Date": EnhancedDifferenceCategory.TIMESTAMP_CHANGE,
    "Quantity": EnhancedDifferenceCategory.CALCULATED_VALUE_CHANGE,
    "Value": EnhancedDifferenceCategory.CALCULATED_VALUE_CHANGE,
    "Boolean": EnhancedDifferenceCategory.BOOLEAN_VALUE_CHANGED,
}

_BOOLEAN_LITERALS = frozenset({"true", "false"})

# Characters that separate date parts, e.g. "2024-01-31" or "31/01/2024"
_DATE_SEPARATORS = ("/", "-")


def _both(predicate: Any, old: Any, new: Any) -> bool:
    return bool(predicate(old) and predicate(new))


class DifferenceCategorizer:
    """Stateless categorizer for single differences.

    Example usage:
        categorizer = DifferenceCategorizer()
        categorizer.categorize(Difference("Total", 1, 2))       # NUMERIC_CHANGED
        categorizer.categorize_enhanced(Difference("Id", 1, 2))  # IDENTIFIER_MISMATCH
        categorizer.field_type("CreatedDate")                   # "Field"
        categorizer.field_type("Created")                       # "Date"
    """

    def categorize(self, diff: Difference) -> DifferenceCategory:
        """Return the basic category of *diff*.

        Precedence:
        1. Either side absent -> NULL_VALUE_CHANGE.
        2. Both numeric / temporal / text / boolean -> the matching value category.
        3. Path ending in an index -> ITEM_ADDED / ITEM_REMOVED /
           COLLECTION_ITEM_CHANGED.
        4. Anything else -> VALUE_CHANGED.
        """
        old, new = diff.old_value, diff.new_value
        if old is None or new is None:
            return DifferenceCategory.NULL_VALUE_CHANGE

        if _both(is_numeric, old, new):
            return DifferenceCategory.NUMERIC_CHANGED
        if _both(is_temporal, old, new):
            return DifferenceCategory.DATE_TIME_CHANGED
        if _both(is_text, old, new):
            return DifferenceCategory.TEXT_CHANGED
        if _both(is_boolean, old, new):
            return DifferenceCategory.BOOLEAN_CHANGED

        if ends_with_index(diff.property_path):
            # Unreachable for absent sides while rule 1 holds.
            if old is None:
                return DifferenceCategory.ITEM_ADDED
            if new is None:
                return DifferenceCategory.ITEM_REMOVED
            return DifferenceCategory.COLLECTION_ITEM_CHANGED

        return DifferenceCategory.VALUE_CHANGED

    def categorize_enhanced(self, diff: Difference) -> EnhancedDifferenceCategory:
        """Return the enhanced category of *diff*."""
        old, new = diff.old_value, diff.new_value

        if has_index(diff.property_path):
            if old is None and new is not None:
                return EnhancedDifferenceCategory.COLLECTION_ELEMENT_EXTRA_PROPERTY
            if old is not None and new is None:
                return EnhancedDifferenceCategory.COLLECTION_ELEMENT_MISSING
            if old is not None and new is not None and type(old) is not type(new):
                return EnhancedDifferenceCategory.INCONSISTENT_DATA_TYPE
            return EnhancedDifferenceCategory.COLLECTION_ITEM_CHANGED

        name = last_segment(diff.property_path)
        field_type = self.field_type(name)
        if field_type in _FIELD_TYPE_CATEGORIES:
            return _FIELD_TYPE_CATEGORIES[field_type]

        if name.startswith("@"):
            if old is None or new is None:
                return EnhancedDifferenceCategory.XML_ATTRIBUTE_MISSING
            return EnhancedDifferenceCategory.XML_ATTRIBUTE_VALUE_CHANGED

        if old is None or new is None:
            return EnhancedDifferenceCategory.NULL_VALUE_CHANGE
        if _both(is_text, old, new):
            return EnhancedDifferenceCategory.TEXT_CONTENT_CHANGED
        if _both(is_numeric, old, new):
            return EnhancedDifferenceCategory.NUMERIC_VALUE_CHANGED
        if _both(is_temporal, old, new):
            return EnhancedDifferenceCategory.DATE_TIME_CHANGED
        if _both(is_boolean, old, new):
            return EnhancedDifferenceCategory.BOOLEAN_VALUE_CHANGED
        if type(old) is not type(new):
            return EnhancedDifferenceCategory.INCONSISTENT_DATA_TYPE
        return EnhancedDifferenceCategory.OTHER

    def field_type(self, name: str) -> str:
        """Name of the first field-name rule matching *name*, or ``"Field"``."""
        for field_type, pattern in _FIELD_PATTERNS:
            if pattern.search(name):
                return field_type
        return "Field"


def infer_value_change_category(old_text: str, new_text: str) -> DifferenceCategory:
    """Guess the category of a recurring ``old -> new`` change from its rendered text.

    Numbers win over boolean literals, which win over date-looking text
    (both sides contain ``/`` or ``-``).  Everything else is text.
    """
    if parse_number(old_text) is not None and parse_number(new_text) is not None:
        return DifferenceCategory.NUMERIC_CHANGED
    if old_text.lower() in _BOOLEAN_LITERALS and new_text.lower() in _BOOLEAN_LITERALS:
        return DifferenceCategory.BOOLEAN_CHANGED
    if any(sep in old_text for sep in _DATE_SEPARATORS) and any(
        sep in new_text for sep in _DATE_SEPARATORS
    ):
        return DifferenceCategory.DATE_TIME_CHANGED
    return DifferenceCategory.TEXT_CHANGED


# Module-level singleton; DifferenceCategorizer is stateless, safe to share.
_categorizer = DifferenceCategorizer()


def categorize(diff: Difference) -> DifferenceCategory:
    """Basic category of *diff* (see ``DifferenceCategorizer.categorize``)."""
    return _categorizer.categorize(diff)


def categorize_enhanced(diff: Difference) -> EnhancedDifferenceCategory:
    """Enhanced category of *diff* (see ``DifferenceCategorizer.categorize_enhanced``)."""
    return _categorizer.categorize_enhanced(diff)
