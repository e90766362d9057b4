#!/usr/bin/env python3
"""
managers package
--------------------
Managers for the accessdb database.

Each manager handles one concern and inherits the shared helpers of
BaseManager (except EntryQueries, which opens its own sessions).

Available Managers:
    BaseManager: Abstract base class with common utilities
    LabelManager: Config-driven label CRUD and entry-link bookkeeping
    TagManager: Tags and entry-tag links
    FeatureManager: Accessibility features and rated entry-feature links
    EntryManager: Entries of the five categories
    CommentManager: Comments on entries
    ReviewManager: Reviews of entries
    EntryQueries: Cross-category reads (fan-out)

Usage:
    from accessdb.database.managers import TagManager

    tags = TagManager(session, logger)
"""
from .base_manager import BaseManager
from .association_manager import LabelManager, LabelManagerConfig
from .tag_manager import TagManager
from .feature_manager import FeatureManager, RatedFeature
from .entry_manager import EntryManager
from .comment_manager import CommentManager
from .review_manager import ReviewManager
from .query_manager import CategorizedEntry, EntryQueries

__all__ = [
    "BaseManager",
    "LabelManager",
    "LabelManagerConfig",
    "TagManager",
    "FeatureManager",
    "RatedFeature",
    "EntryManager",
    "CommentManager",
    "ReviewManager",
    "EntryQueries",
    "CategorizedEntry",
]
