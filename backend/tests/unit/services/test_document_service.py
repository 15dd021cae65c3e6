"""
Unit Tests for response enrichment
"""
import pytest

from bachub.schemas import CommentCreate, FavoriteCreate, RatingCreate
from bachub.services import DocumentService
from bachub.storage import MemoryStorage
from conftest import make_user, make_subject, make_document


@pytest.fixture
def memory() -> MemoryStorage:
    return MemoryStorage()


class TestDocumentService:

    async def test_list_adds_subject_and_totals(self, memory):
        admin = await make_user(memory, role="admin")
        subject = await make_subject(memory, name="Mathématiques", color="blue")
        await make_document(memory, subject, admin, title="Bac D", year=2023)

        documents = await DocumentService(memory).list_documents()

        assert len(documents) == 1
        doc = documents[0]
        assert doc.subject == "Mathématiques"
        assert doc.subject_color == "blue"
        assert doc.average_rating == 0
        assert doc.rating_count == 0
        assert doc.comment_count == 0

    async def test_missing_subject_falls_back(self, memory):
        admin = await make_user(memory, role="admin")
        subject = await make_subject(memory)
        document = await make_document(memory, subject, admin)
        await memory.delete_subject(subject.id)

        enriched = await DocumentService(memory).with_subject(document)

        assert enriched.subject == "Unknown"
        assert enriched.subject_color == "gray"

    async def test_detail_for_anonymous_and_user(self, memory):
        admin = await make_user(memory, role="admin")
        user = await make_user(memory)
        subject = await make_subject(memory)
        document = await make_document(memory, subject, admin)
        await memory.create_rating(RatingCreate(user_id=user.id, document_id=document.id, rating=4))
        await memory.create_rating(RatingCreate(user_id=admin.id, document_id=document.id, rating=2))
        await memory.create_favorite(FavoriteCreate(user_id=user.id, document_id=document.id))

        service = DocumentService(memory)
        anonymous = await service.detail(document)
        personal = await service.detail(document, user)

        assert anonymous.is_favorite is False
        assert anonymous.user_rating == 0
        assert personal.is_favorite is True
        assert personal.user_rating == 4
        assert personal.average_rating == 3
        assert personal.rating_count == 2

    async def test_comments_embed_author(self, memory):
        admin = await make_user(memory, role="admin")
        subject = await make_subject(memory)
        document = await make_document(memory, subject, admin)
        await memory.create_comment(CommentCreate(
            document_id=document.id, user_id=admin.id, content="Réponse", is_admin_response=True
        ))

        comments = await DocumentService(memory).comments_for(document.id)

        assert comments[0].user.username == admin.username
        assert comments[0].user.role == "admin"
        assert comments[0].is_admin_response is True

    async def test_comment_by_deleted_user_has_no_author(self, memory):
        admin = await make_user(memory, role="admin")
        user = await make_user(memory)
        subject = await make_subject(memory)
        document = await make_document(memory, subject, admin)
        await memory.create_comment(CommentCreate(document_id=document.id, user_id=user.id, content="Salut"))
        await memory.delete_user(user.id)

        comments = await DocumentService(memory).comments_for(document.id)

        assert comments[0].user is None

    async def test_favorites_include_document(self, memory):
        admin = await make_user(memory, role="admin")
        subject = await make_subject(memory, name="SVT", color="green")
        kept = await make_document(memory, subject, admin, title="Gardé")
        dropped = await make_document(memory, subject, admin, title="Supprimé")
        await memory.create_favorite(FavoriteCreate(user_id=admin.id, document_id=kept.id))
        await memory.create_favorite(FavoriteCreate(user_id=admin.id, document_id=dropped.id))
        await memory.delete_document(dropped.id)

        favorites = await DocumentService(memory).favorites_for(admin.id)
        by_document = {f.document_id: f.document for f in favorites}

        assert by_document[kept.id].subject_color == "green"
        assert by_document[dropped.id] is None

    async def test_admin_stats(self, memory):
        admin = await make_user(memory, role="admin")
        user = await make_user(memory)
        subject = await make_subject(memory)
        documents = [await make_document(memory, subject, admin, title=f"Doc {i}") for i in range(7)]
        for _ in range(3):
            await memory.increment_download_count(documents[0].id)
        await memory.increment_download_count(documents[1].id)
        await memory.create_rating(RatingCreate(user_id=user.id, document_id=documents[0].id, rating=5))
        await memory.create_comment(CommentCreate(document_id=documents[0].id, user_id=user.id, content="Top"))

        stats = await DocumentService(memory).admin_stats()

        assert stats.total_users == 2
        assert stats.total_documents == 7
        assert stats.total_downloads == 4
        assert stats.total_ratings == 1
        assert stats.total_comments == 1
        assert len(stats.recent_documents) == 5
        assert stats.recent_documents[0].title == "Doc 6"
        assert [d.title for d in stats.popular_documents[:2]] == ["Doc 0", "Doc 1"]
