"""
Seed data for a fresh Bac-Hub installation.

Runs at startup when SEED_ON_STARTUP is set, or manually with:
    python -m bachub.db.seed_data

Demo content (accounts, subjects, sample papers, announcement) is only
created when the store has no users; default footer settings are filled in
key by key, so settings added later still get a value.
"""
import asyncio
import json
from typing import Dict, List

from bachub.core.config import settings
from bachub.core.database import AsyncSessionLocal, init_db, close_db
from bachub.core.logging_config import get_logger
from bachub.core.security import get_password_hash
from bachub.models import Subject, User, UserRole
from bachub.schemas import (
    AnnouncementCreate,
    DocumentCreate,
    SettingCreate,
    SubjectCreate,
    UserCreate,
)
from bachub.storage import Storage, DatabaseStorage, get_memory_storage

logger = get_logger("seed")


# ==================== Sample Data Constants ====================

SAMPLE_SUBJECTS = [
    {"name": "Mathématiques", "color": "blue"},
    {"name": "Physique-Chimie", "color": "red"},
    {"name": "SVT", "color": "green"},
    {"name": "Français", "color": "yellow"},
    {"name": "Philosophie", "color": "purple"},
    {"name": "Histoire-Géo", "color": "orange"},
    {"name": "Anglais", "color": "indigo"},
]

SAMPLE_DOCUMENTS = [
    {
        "title": "Bac D - Épreuve de Mathématiques",
        "description": "Sujet complet avec corrigé détaillé de l'épreuve de mathématiques du Baccalauréat série D.",
        "year": 2023,
        "subject": "Mathématiques",
        "file_name": "math_bac_d_2023.pdf",
        "file_size": 1200000,
    },
    {
        "title": "Bac A - Sciences de la Vie et de la Terre",
        "description": "Épreuve complète de SVT avec schémas et corrigés pour le Baccalauréat série A.",
        "year": 2022,
        "subject": "SVT",
        "file_name": "svt_bac_a_2022.pdf",
        "file_size": 2400000,
    },
    {
        "title": "Bac A, C, D - Philosophie",
        "description": "Sujets et corrigés de l'épreuve de Philosophie avec méthodologie de dissertation et commentaire.",
        "year": 2023,
        "subject": "Philosophie",
        "file_name": "philo_bac_acd_2023.pdf",
        "file_size": 1800000,
    },
]

SAMPLE_ANNOUNCEMENT = {
    "title": "Nouveaux sujets disponibles",
    "content": "Nouveaux sujets de Mathématiques et Sciences Physiques disponibles pour le Bac 2023!",
    "active": True,
}

DEFAULT_SETTINGS = {
    "footer_email": "contact@bachub-tchad.com",
    "footer_phone": "+235 XX XX XX XX",
    "footer_address": "N'Djamena, Tchad",
    "social_facebook": "https://facebook.com",
    "social_twitter": "https://twitter.com",
    "social_instagram": "https://instagram.com",
    "footer_description": "Votre plateforme de ressources éducatives pour réussir votre baccalauréat.",
    "footer_copyright": "© {year} Bac-Hub Tchad. Tous droits réservés.",
    "footer_quick_links": json.dumps([
        {"name": "Accueil", "href": "/"},
        {"name": "Documents", "href": "/"},
        {"name": "À propos", "href": "/"},
        {"name": "Contact", "href": "/"},
    ], ensure_ascii=False),
}


# ==================== Seeders ====================

async def seed_users(storage: Storage) -> List[User]:
    """Create the demo admin and student accounts"""
    admin = await storage.create_user(UserCreate(
        username="admin",
        password=get_password_hash(settings.SEED_ADMIN_PASSWORD),
        email="admin@douleinnova.com",
        full_name="Admin Doule Innova",
        role=UserRole.ADMIN.value,
    ))
    student = await storage.create_user(UserCreate(
        username="eleve",
        password=get_password_hash(settings.SEED_STUDENT_PASSWORD),
        email="eleve@douleinnova.com",
        full_name="Élève Test",
        role=UserRole.USER.value,
    ))
    logger.info("Created demo accounts: admin, eleve")
    return [admin, student]


async def seed_subjects(storage: Storage) -> Dict[str, Subject]:
    subjects = {}
    for data in SAMPLE_SUBJECTS:
        subject = await storage.get_subject_by_name(data["name"])
        if not subject:
            subject = await storage.create_subject(SubjectCreate(**data))
        subjects[subject.name] = subject
    logger.info(f"Subjects ready: {len(subjects)}")
    return subjects


async def seed_documents(storage: Storage, subjects: Dict[str, Subject], uploader: User) -> int:
    for data in SAMPLE_DOCUMENTS:
        fields = {k: v for k, v in data.items() if k != "subject"}
        await storage.create_document(DocumentCreate(
            **fields,
            subject_id=subjects[data["subject"]].id,
            uploaded_by=uploader.id,
        ))
    logger.info(f"Created {len(SAMPLE_DOCUMENTS)} sample documents")
    return len(SAMPLE_DOCUMENTS)


async def seed_announcement(storage: Storage, author: User) -> None:
    await storage.create_announcement(AnnouncementCreate(**SAMPLE_ANNOUNCEMENT, created_by=author.id))
    logger.info("Created welcome announcement")


async def seed_settings(storage: Storage) -> int:
    """Add any default setting whose key is missing; existing values are left alone"""
    added = 0
    for key, value in DEFAULT_SETTINGS.items():
        if not await storage.get_setting(key):
            await storage.create_setting(SettingCreate(key=key, value=value))
            added += 1

    if added:
        logger.info(f"Added {added} default settings")
    else:
        logger.debug("All default settings already exist")
    return added


async def seed_all(storage: Storage) -> None:
    """Seed demo content into an empty store, then fill in default settings"""
    if await storage.count_users() == 0:
        logger.info("Empty store, seeding demo content...")
        admin, _ = await seed_users(storage)
        subjects = await seed_subjects(storage)
        await seed_documents(storage, subjects, admin)
        await seed_announcement(storage, admin)
    else:
        logger.debug("Users present, skipping demo content")

    await seed_settings(storage)


async def seed_configured_storage() -> None:
    """Seed whichever backend STORAGE_BACKEND selects"""
    if settings.STORAGE_BACKEND == "memory":
        await seed_all(get_memory_storage())
        return

    async with AsyncSessionLocal() as session:
        await seed_all(DatabaseStorage(session))


async def main():
    await init_db()
    try:
        await seed_configured_storage()
    finally:
        await close_db()


def cli():
    """Console entry point"""
    asyncio.run(main())


if __name__ == "__main__":
    cli()
