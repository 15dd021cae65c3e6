# Re-export all models for convenient imports
from bachub.models.user import User, UserRole
from bachub.models.subject import Subject
from bachub.models.document import Document
from bachub.models.rating import Rating
from bachub.models.comment import Comment
from bachub.models.favorite import Favorite
from bachub.models.announcement import Announcement
from bachub.models.setting import Setting
from bachub.models.session import UserSession

__all__ = [
    "User",
    "UserRole",
    "Subject",
    "Document",
    "Rating",
    "Comment",
    "Favorite",
    "Announcement",
    "Setting",
    "UserSession",
]
