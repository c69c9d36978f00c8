from channelhub.models.subscription import Subscription
from channelhub.models.user import User
from channelhub.models.video import Video
from channelhub.models.watch_history import WatchHistoryEntry

__all__ = [
    "Subscription",
    "User",
    "Video",
    "WatchHistoryEntry",
]
