from videotube.db.models.user import User
from videotube.db.models.video import Video
from videotube.db.models.subscription import Subscription

__all__ = ["User", "Video", "Subscription"]
