"""
Unit Tests for startup seeding
"""
import json

from bachub.core.security import verify_password
from bachub.core.config import settings
from bachub.db.seed_data import seed_all, seed_settings, DEFAULT_SETTINGS, SAMPLE_SUBJECTS


class TestSeedData:

    async def test_seeds_empty_store(self, storage):
        await seed_all(storage)

        admin = await storage.get_user_by_username("admin")
        student = await storage.get_user_by_username("eleve")
        assert admin.role == "admin"
        assert student.role == "user"
        assert verify_password(settings.SEED_ADMIN_PASSWORD, admin.password)

        subjects = await storage.get_subjects()
        assert [(s.name, s.color) for s in subjects] == [(s["name"], s["color"]) for s in SAMPLE_SUBJECTS]

        documents = await storage.get_documents()
        assert sorted(d.file_name for d in documents) == [
            "math_bac_d_2023.pdf", "philo_bac_acd_2023.pdf", "svt_bac_a_2022.pdf",
        ]
        assert all(d.uploaded_by == admin.id for d in documents)

        announcements = await storage.get_announcements(active_only=True)
        assert [a.title for a in announcements] == ["Nouveaux sujets disponibles"]

    async def test_second_run_adds_nothing(self, storage):
        await seed_all(storage)
        await seed_all(storage)

        assert await storage.count_users() == 2
        assert await storage.count_documents() == 3
        assert len(await storage.get_settings()) == len(DEFAULT_SETTINGS)

    async def test_existing_settings_untouched(self, storage):
        await storage.update_setting_by_key("footer_email", "custom@bachub.td")

        added = await seed_settings(storage)

        assert added == len(DEFAULT_SETTINGS) - 1
        assert (await storage.get_setting("footer_email")).value == "custom@bachub.td"

    async def test_quick_links_are_json(self, storage):
        await seed_settings(storage)

        links = json.loads((await storage.get_setting("footer_quick_links")).value)

        assert links[0] == {"name": "Accueil", "href": "/"}
