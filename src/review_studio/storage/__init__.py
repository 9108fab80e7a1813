"""Storage module for Review Studio persistence.

Provides SQLite-based storage for user preferences (API keys, selected
model, painter theme).
"""

from review_studio.storage.preferences import (
    PreferenceStore,
    get_preference_store,
)

__all__ = [
    "PreferenceStore",
    "get_preference_store",
]
