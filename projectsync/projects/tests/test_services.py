from unittest import mock

import pytest

from projectsync.core.exceptions import Forbidden
from projectsync.core.exceptions import RecordNotFound
from projectsync.core.exceptions import ValidationFailed
from projectsync.projects.services import MutationCoordinator
from projectsync.realtime.channel import BroadcastChannel
from projectsync.store.memory import MemoryRecordStore
from projectsync.users.authentication import Actor

ALICE = Actor(user_id=1, username="alice", role="admin")
VICTOR = Actor(user_id=2, username="victor", role="viewer")

PAYLOAD = {"title": "Launch Plan", "description": "Ship the first public release"}
UPDATE = {**PAYLOAD, "title": "Launch Plan v2", "status": "in-progress", "priority": "high"}


@pytest.fixture
def store():
    return MemoryRecordStore()


@pytest.fixture
def local_channel():
    return BroadcastChannel()


@pytest.fixture
def coordinator(store, local_channel):
    return MutationCoordinator(store, local_channel)


def test_create_writes_notifies_and_publishes(coordinator, store, local_channel):
    session = local_channel.subscribe()
    project = coordinator.create_project(ALICE, PAYLOAD)

    assert project.created_by == "alice"
    assert project.status == "planning"
    (notification,) = store.list_notifications()
    assert notification.message == 'New project "Launch Plan" was created by alice'
    assert notification.type == "create"
    assert notification.project_id == project.id
    assert notification.user_id == ALICE.user_id

    (event,) = session.drain()
    assert event.name == "projectCreated"
    assert event.payload["project"]["id"] == project.id
    assert event.payload["notification"]["message"] == notification.message


def test_update_and_delete_messages(coordinator, store, local_channel):
    project = coordinator.create_project(ALICE, PAYLOAD)
    session = local_channel.subscribe()

    coordinator.update_project(ALICE, project.id, UPDATE)
    coordinator.delete_project(ALICE, project.id)

    messages = [n.message for n in store.list_notifications()]
    assert messages[:2] == [
        'Project "Launch Plan v2" was deleted by alice',
        'Project "Launch Plan v2" was updated by alice',
    ]
    updated, deleted = session.drain()
    assert updated.name == "projectUpdated"
    assert updated.payload["project"]["title"] == "Launch Plan v2"
    assert deleted.name == "projectDeleted"
    assert deleted.payload["projectId"] == project.id
    assert "project" not in deleted.payload


def test_validation_runs_before_authorization(coordinator, store):
    with pytest.raises(ValidationFailed):
        coordinator.create_project(VICTOR, {"title": "x"})
    with pytest.raises(Forbidden):
        coordinator.create_project(VICTOR, PAYLOAD)
    assert store.list_projects() == []
    assert store.list_notifications() == []


def test_viewer_cannot_delete_and_learns_nothing(coordinator):
    with pytest.raises(Forbidden):
        coordinator.delete_project(VICTOR, 999)


def test_missing_project_stops_pipeline(coordinator, store, local_channel):
    session = local_channel.subscribe()
    with pytest.raises(RecordNotFound):
        coordinator.update_project(ALICE, 999, UPDATE)
    with pytest.raises(RecordNotFound):
        coordinator.delete_project(ALICE, "999")
    assert store.list_notifications() == []
    assert session.drain() == []


def test_notification_failure_still_broadcasts(coordinator, store, local_channel, caplog):
    session = local_channel.subscribe()
    with mock.patch.object(store, "insert_notification", side_effect=RuntimeError("disk")):
        project = coordinator.create_project(ALICE, PAYLOAD)

    assert store.list_projects()[0].id == project.id
    (event,) = session.drain()
    assert event.payload["notification"] is None
    assert "Could not record create notification" in caplog.text


def test_publish_failure_is_swallowed(coordinator, store, local_channel, caplog):
    with mock.patch.object(local_channel, "publish", side_effect=RuntimeError("down")):
        project = coordinator.create_project(ALICE, PAYLOAD)
    assert store.list_projects()[0].id == project.id
    assert "Broadcast of projectCreated failed" in caplog.text


def test_same_id_updates_last_write_wins(coordinator, store):
    project = coordinator.create_project(ALICE, PAYLOAD)
    first = coordinator.update_project(ALICE, project.id, UPDATE)
    second = coordinator.update_project(
        ALICE, project.id, {**UPDATE, "title": "Final Title"}
    )
    assert second.updated_at > first.updated_at
    assert store.list_projects()[0].title == "Final Title"
