from bachub.modules.auth.dependencies import (
    get_current_user,
    get_optional_user,
    get_current_admin,
    get_document_or_404,
)

__all__ = [
    "get_current_user",
    "get_optional_user",
    "get_current_admin",
    "get_document_or_404",
]
