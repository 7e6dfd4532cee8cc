from projectsync.client.reconciler import NotificationFeed
from projectsync.client.reconciler import ProjectListReconciler


def _project(pk, title="Launch Plan", updated_at="2026-05-01T10:00:00Z"):
    return {"id": pk, "title": title, "updatedAt": updated_at}


def _created(project, note_id=1):
    return {"project": project, "notification": {"id": note_id, "read": False}}


class TestProjectListReconciler:
    def test_direct_response_then_broadcast_leaves_one_entry(self):
        local = ProjectListReconciler()
        assert local.record_created(_project(7)) is True
        assert local.apply("projectCreated", _created(_project(7))) is False
        assert local.ids() == ["7"]

    def test_broadcast_then_direct_response_leaves_one_entry(self):
        local = ProjectListReconciler()
        local.apply("projectCreated", _created(_project(7)))
        local.record_created(_project("7"))
        assert len(local) == 1

    def test_new_projects_go_first(self):
        local = ProjectListReconciler([_project(1)])
        local.apply_created(_project(2))
        assert local.ids() == ["2", "1"]

    def test_update_replaces_by_id_and_ignores_unknown(self):
        local = ProjectListReconciler([_project(1), _project(2)])
        changed = local.apply(
            "projectUpdated",
            {"project": _project(1, "Renamed", "2026-05-01T11:00:00Z"), "notification": None},
        )
        assert changed is True
        assert local.get(1)["title"] == "Renamed"
        assert local.ids() == ["1", "2"]
        assert local.apply_updated(_project(99)) is False
        assert len(local) == 2  # noqa: PLR2004

    def test_stale_update_is_skipped(self):
        local = ProjectListReconciler([_project(1, "Newer", "2026-05-01T12:00:00Z")])
        assert local.apply_updated(_project(1, "Older", "2026-05-01T09:00:00Z")) is False
        assert local.get(1)["title"] == "Newer"

    def test_delete_is_idempotent(self):
        local = ProjectListReconciler([_project(1), _project(2)])
        payload = {"projectId": 1, "notification": None}
        assert local.apply("projectDeleted", payload) is True
        assert local.apply("projectDeleted", payload) is False
        assert local.ids() == ["2"]

    def test_replace_all_drops_duplicates(self):
        local = ProjectListReconciler()
        local.replace_all([_project(1), _project(1), _project(2)])
        assert local.ids() == ["1", "2"]

    def test_unknown_event_ignored(self):
        local = ProjectListReconciler([_project(1)])
        assert local.apply("somethingElse", {}) is False


class TestNotificationFeed:
    def test_prepends_without_duplicates(self):
        feed = NotificationFeed()
        feed.replace_all([{"id": 1, "read": True}])
        assert feed.apply("projectCreated", _created(_project(7), note_id=2)) is True
        assert feed.apply("projectCreated", _created(_project(7), note_id=2)) is False
        assert [n["id"] for n in feed.items] == [2, 1]
        assert feed.unread_count() == 1

    def test_missing_notification_ignored(self):
        feed = NotificationFeed()
        assert feed.apply("projectDeleted", {"projectId": 1, "notification": None}) is False
        assert len(feed) == 0

    def test_mark_read(self):
        feed = NotificationFeed()
        feed.replace_all([{"id": 1, "read": False}])
        assert feed.mark_read("1") is True
        assert feed.mark_read(1) is False
        assert feed.unread_count() == 0
