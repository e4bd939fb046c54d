"""Console state: the collection cache, the notification slot and the
Streamlit session helpers that keep one controller alive per browser session.
"""

from .collection_cache import CollectionCache
from .notifications import Notification, NotificationSlot

__all__ = [
    "CollectionCache",
    "Notification",
    "NotificationSlot",
]
