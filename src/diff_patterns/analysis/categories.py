"""Closed category taxonomies used across the analyzers.

StrEnum values are the lowercased member names (Python 3.11+), e.g.
``DifferenceCategory.NULL_VALUE_CHANGE == "null_value_change"``.
"""

from __future__ import annotations

from enum import StrEnum, auto

__all__ = [
    "DifferenceCategory",
    "EnhancedDifferenceCategory",
    "FileClassification",
    "PatternBucket",
]


class DifferenceCategory(StrEnum):
    """Basic category of a single difference, decided by value shape."""

    TEXT_CHANGED = auto()
    NUMERIC_CHANGED = auto()
    DATE_TIME_CHANGED = auto()
    BOOLEAN_CHANGED = auto()
    COLLECTION_ITEM_CHANGED = auto()
    ITEM_ADDED = auto()
    ITEM_REMOVED = auto()
    NULL_VALUE_CHANGE = auto()
    VALUE_CHANGED = auto()
    GENERAL_VALUE_CHANGED = auto()
    UNCATEGORIZED_DIFFERENCE = auto()


class EnhancedDifferenceCategory(StrEnum):
    """Richer category that also looks at collection structure and field names."""

    # Value-shape categories
    TEXT_CONTENT_CHANGED = auto()
    NUMERIC_VALUE_CHANGED = auto()
    DATE_TIME_CHANGED = auto()
    BOOLEAN_VALUE_CHANGED = auto()
    COLLECTION_ITEM_CHANGED = auto()
    ITEM_ADDED = auto()
    ITEM_REMOVED = auto()
    NULL_VALUE_CHANGE = auto()

    # Collection structure
    COLLECTION_ELEMENT_MISSING = auto()
    COLLECTION_ELEMENT_EXTRA_PROPERTY = auto()
    COLLECTION_ELEMENT_COUNT_MISMATCH = auto()
    COLLECTION_ELEMENT_OUT_OF_ORDER = auto()

    # Typing and XML
    MISSING_REQUIRED_FIELD = auto()
    INCONSISTENT_DATA_TYPE = auto()
    XML_ATTRIBUTE_VALUE_CHANGED = auto()
    XML_ATTRIBUTE_MISSING = auto()

    # Field-name driven
    IDENTIFIER_MISMATCH = auto()
    STATUS_VALUE_CHANGE = auto()
    TIMESTAMP_CHANGE = auto()
    FORMAT_MISMATCH = auto()
    NAME_OR_LABEL_CHANGE = auto()
    CALCULATED_VALUE_CHANGE = auto()
    CONFIGURATION_CHANGE = auto()

    # Whole-document structure
    SCHEMA_VIOLATION = auto()
    STRUCTURAL_MISMATCH = auto()

    OTHER = auto()


class FileClassification(StrEnum):
    """Dominant kind of difference in one file pair.

    - VALUE         : mostly values changed
    - MISSING       : mostly properties absent on one side
    - ORDER         : mostly collection elements that look reordered
    - MIXED         : more than one kind is significant
    - UNCATEGORIZED : no kind is significant, or only unclassifiable ones
    """

    VALUE = auto()
    MISSING = auto()
    ORDER = auto()
    MIXED = auto()
    UNCATEGORIZED = auto()


class PatternBucket(StrEnum):
    """Result bucket a finished structural pattern is routed into."""

    CRITICAL_MISSING = auto()
    MISSING_PROPERTIES = auto()
    MISSING_COLLECTION_ELEMENTS = auto()
    ORDER_DIFFERENCES = auto()
    CONSISTENT_VALUE_DIFFERENCES = auto()
    GENERAL_VALUE_DIFFERENCES = auto()
    UNCATEGORIZED = auto()
