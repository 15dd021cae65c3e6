from fastapi import APIRouter

from bachub.api.v1.endpoints import auth, subjects, documents, favorites, announcements, settings, health
from bachub.api.v1.endpoints.admin import admin_router

api_router = APIRouter()

api_router.include_router(health.router, tags=["Health"])

# Auth routes live at the API root: /register, /login, /logout, /user
api_router.include_router(auth.router, tags=["Authentication"])
api_router.include_router(subjects.router, prefix="/subjects", tags=["Subjects"])
api_router.include_router(documents.router, prefix="/documents", tags=["Documents"])
api_router.include_router(favorites.router, prefix="/favorites", tags=["Favorites"])
api_router.include_router(announcements.router, prefix="/announcements", tags=["Announcements"])
api_router.include_router(settings.router, prefix="/settings", tags=["Settings"])

# Admin routes
api_router.include_router(admin_router)
