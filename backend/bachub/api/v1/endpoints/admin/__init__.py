"""
Admin API endpoints for the Bac-Hub dashboard.
All endpoints require the admin role.
"""
from fastapi import APIRouter

from bachub.api.v1.endpoints.admin import dashboard, users, documents, subjects, announcements, settings, comments

admin_router = APIRouter(prefix="/admin", tags=["Admin"])

# Include all admin sub-routers
admin_router.include_router(dashboard.router, tags=["Admin Dashboard"])
admin_router.include_router(users.router, prefix="/users", tags=["Admin Users"])
admin_router.include_router(documents.router, prefix="/documents", tags=["Admin Documents"])
admin_router.include_router(subjects.router, prefix="/subjects", tags=["Admin Subjects"])
admin_router.include_router(announcements.router, prefix="/announcements", tags=["Admin Announcements"])
admin_router.include_router(settings.router, prefix="/settings", tags=["Admin Settings"])
admin_router.include_router(comments.router, prefix="/comments", tags=["Admin Comments"])
