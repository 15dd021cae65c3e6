from bachub.services.document_service import DocumentService

__all__ = ["DocumentService"]
