from bachub.schemas.base import CamelModel, MessageResponse
from bachub.schemas.auth import (
    UserRegister,
    UserLogin,
    UserCreate,
    AdminUserCreate,
    UserUpdate,
    UserResponse,
    UserPublic,
)
from bachub.schemas.subject import SubjectCreate, SubjectUpdate, SubjectResponse
from bachub.schemas.document import (
    DocumentCreateRequest,
    DocumentCreate,
    DocumentUpdate,
    DocumentResponse,
    DocumentWithSubject,
    DocumentWithStats,
    DocumentDetail,
    DownloadInfo,
    DownloadResponse,
)
from bachub.schemas.rating import RatingRequest, RatingCreate, RatingResponse, RatingResult
from bachub.schemas.comment import (
    CommentCreateRequest,
    CommentCreate,
    CommentUpdate,
    CommentResponse,
    CommentWithUser,
)
from bachub.schemas.favorite import FavoriteCreate, FavoriteResponse, FavoriteWithDocument
from bachub.schemas.announcement import (
    AnnouncementCreateRequest,
    AnnouncementCreate,
    AnnouncementUpdate,
    AnnouncementResponse,
)
from bachub.schemas.setting import SettingCreate, SettingUpsert, SettingUpdate, SettingResponse
from bachub.schemas.admin import AdminStats
