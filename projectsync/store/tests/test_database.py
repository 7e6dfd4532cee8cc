from datetime import date

import pytest

from projectsync.core.exceptions import RecordNotFound
from projectsync.notifications.models import Notification
from projectsync.projects.models import Project
from projectsync.store import UsernameTaken
from projectsync.store.database import DatabaseRecordStore
from projectsync.store.database import DatabaseUserStore
from projectsync.store.records import NotificationDraft
from projectsync.store.records import ProjectDraft
from projectsync.store.records import ProjectFilters

pytestmark = pytest.mark.django_db


def _draft(title="Launch Plan", **kwargs):
    values = {
        "title": title,
        "description": "Ship the first public release",
        "status": "planning",
        "priority": "medium",
        "created_by": "alice",
    }
    values.update(kwargs)
    return ProjectDraft(**values)


class TestDatabaseRecordStore:
    def setup_method(self):
        self.store = DatabaseRecordStore()

    def test_insert_persists_row(self):
        project = self.store.insert_project(_draft(due_date=date(2030, 1, 1)))
        row = Project.objects.get(pk=project.id)
        assert row.title == "Launch Plan"
        assert row.due_date == date(2030, 1, 1)
        assert project.created_at == project.updated_at

    def test_list_search_is_case_insensitive_over_title_and_description(self):
        self.store.insert_project(_draft("Website"))
        self.store.insert_project(_draft("Backend", description="Rewrite the WEBSITE api"))
        self.store.insert_project(_draft("Mobile"))
        found = self.store.list_projects(ProjectFilters(search="webSite"))
        assert [p.title for p in found] == ["Backend", "Website"]

    def test_update_overwrites_fields_and_advances_timestamp(self):
        project = self.store.insert_project(_draft(due_date=date(2030, 1, 1)))
        updated = self.store.update_project(
            project.id,
            {"title": "Renamed", "priority": "urgent", "due_date": None},
        )
        assert updated.priority == "urgent"
        assert updated.due_date is None
        assert updated.updated_at > project.updated_at
        assert Project.objects.get(pk=project.id).title == "Renamed"

    def test_update_missing_or_malformed_id(self):
        with pytest.raises(RecordNotFound, match="Project not found"):
            self.store.update_project(12345, {"title": "x"})
        with pytest.raises(RecordNotFound):
            self.store.update_project("not-a-number", {"title": "x"})

    def test_delete(self):
        project = self.store.insert_project(_draft())
        removed = self.store.delete_project(project.id)
        assert removed.id == project.id
        assert not Project.objects.filter(pk=project.id).exists()
        with pytest.raises(RecordNotFound):
            self.store.delete_project(project.id)

    def test_notification_outlives_project(self):
        project = self.store.insert_project(_draft())
        note = self.store.insert_notification(
            NotificationDraft(
                message="gone soon", type="delete", project_id=project.id, user_id=7
            )
        )
        self.store.delete_project(project.id)
        assert Notification.objects.get(pk=note.id).project_id == project.id

    def test_mark_read(self):
        note = self.store.insert_notification(
            NotificationDraft(message="m", type="update", project_id=1, user_id=1)
        )
        assert self.store.mark_notification_read(note.id).read is True
        assert self.store.mark_notification_read(note.id).read is True
        with pytest.raises(RecordNotFound, match="Notification not found"):
            self.store.mark_notification_read(note.id + 100)


class TestDatabaseUserStore:
    def test_add_user_keeps_hash(self):
        users = DatabaseUserStore()
        created = users.add_user("alice", "md5$salt$hash", "admin")
        fetched = users.get_user("alice")
        assert fetched.id == created.id
        assert fetched.password == "md5$salt$hash"  # noqa: S105
        assert fetched.role == "admin"

    def test_duplicate_username(self):
        users = DatabaseUserStore()
        users.add_user("alice", "hash", "admin")
        with pytest.raises(UsernameTaken):
            users.add_user("alice", "hash", "viewer")
