"""Unit tests for TaskService edits to the task document."""

from decimal import Decimal

import pytest

from src.apex.core.exceptions import (
    ConcurrentUpdateError,
    ConflictError,
    ProjectNotFoundError,
    TaskNotFoundError,
)
from src.apex.schemas.task import TaskCreate, TaskNoteCreate, TaskUpdate, TimeEntryCreate
from src.apex.services.task_service import TaskService
from tests.factories import ProjectFactory

pytestmark = pytest.mark.unit


@pytest.fixture
def service(project_repo, mock_session) -> TaskService:
    return TaskService(project_repo, mock_session, max_attempts=3)


@pytest.fixture
def project(project_repo):
    project = ProjectFactory.build(
        id="WTB_001",
        tasks=[
            {"id": 1, "name": "Survey", "status": "pending", "actualHours": 0},
            {
                "id": 2,
                "name": "Install",
                "status": "pending",
                "actualHours": 0,
                "subtasks": [{"id": "2a", "name": "Cabling"}],
            },
        ],
    )
    project_repo.seed(project)
    return project


def stored_tasks(project_repo, project_id="WTB_001"):
    return project_repo.row(project_id)["tasks"]


class TestCreate:
    async def test_appends_root_task(self, service, project_repo, mock_session, project):
        task = await service.create_task("WTB_001", TaskCreate(name="Commission", priority="high"))

        assert task["id"].startswith("t_")
        assert task["status"] == "pending"
        assert task["priority"] == "high"
        assert task["createdAt"] == task["updatedAt"]
        assert stored_tasks(project_repo)[-1]["id"] == task["id"]
        assert project_repo.row("WTB_001")["version"] == 2
        mock_session.commit.assert_awaited_once()

    async def test_keeps_client_id(self, service, project):
        task = await service.create_task("WTB_001", TaskCreate(id=10, name="Paint"))

        assert task["id"] == 10

    async def test_duplicate_id_conflicts(self, service, project_repo, mock_session, project):
        with pytest.raises(ConflictError):
            await service.create_task("WTB_001", TaskCreate(id="2a", name="Dup"))

        mock_session.rollback.assert_awaited_once()
        assert len(stored_tasks(project_repo)) == 2

    async def test_nested_subtask_id_clash_conflicts(
        self, service, project_repo, mock_session, project
    ):
        payload = TaskCreate(name="Install 2", subtasks=[{"id": "2a", "name": "Cabling"}])

        with pytest.raises(ConflictError, match="2a"):
            await service.create_task("WTB_001", payload)

        mock_session.rollback.assert_awaited_once()
        assert len(stored_tasks(project_repo)) == 2

    async def test_repeated_ids_within_new_subtree_conflict(self, service, project):
        payload = TaskCreate(
            id="3", name="Commission", subtasks=[{"id": "3a"}, {"id": "3", "name": "Again"}]
        )

        with pytest.raises(ConflictError):
            await service.create_task("WTB_001", payload)

    async def test_new_subtree_with_fresh_ids_is_stored(self, service, project_repo, project):
        payload = TaskCreate(id="3", name="Commission", subtasks=[{"id": "3a"}, {"id": "3b"}])

        await service.create_task("WTB_001", payload)

        assert [t["id"] for t in stored_tasks(project_repo)[-1]["subtasks"]] == ["3a", "3b"]

    async def test_unknown_project(self, service):
        with pytest.raises(ProjectNotFoundError):
            await service.create_task("NOPE", TaskCreate(name="x"))

    async def test_subtask_goes_under_parent(self, service, project_repo, project):
        subtask = await service.create_subtask("WTB_001", "2", TaskCreate(name="Torque"))

        install = stored_tasks(project_repo)[1]
        assert [t["id"] for t in install["subtasks"]] == ["2a", subtask["id"]]

    async def test_subtask_with_missing_parent(self, service, project):
        with pytest.raises(TaskNotFoundError):
            await service.create_subtask("WTB_001", "99", TaskCreate(name="Torque"))

    async def test_subtask_carrying_existing_id_conflicts(self, service, project_repo, project):
        payload = TaskCreate(name="Torque", subtasks=[{"id": 1, "name": "Survey again"}])

        with pytest.raises(ConflictError):
            await service.create_subtask("WTB_001", "2", payload)

        assert len(stored_tasks(project_repo)[1]["subtasks"]) == 1


class TestUpdateAndDelete:
    async def test_merges_changes(self, service, project_repo, project):
        task = await service.update_task(
            "WTB_001", "1", TaskUpdate(status="completed", ragStatus="green")
        )

        assert task["id"] == 1
        assert task["status"] == "completed"
        assert task["ragStatus"] == "green"
        assert task["name"] == "Survey"
        assert stored_tasks(project_repo)[0]["status"] == "completed"

    async def test_updates_nested_task(self, service, project_repo, project):
        await service.update_task("WTB_001", "2a", TaskUpdate(name="Fibre"))

        assert stored_tasks(project_repo)[1]["subtasks"][0]["name"] == "Fibre"

    async def test_subtasks_reusing_another_tasks_id_conflict(
        self, service, project_repo, mock_session, project
    ):
        with pytest.raises(ConflictError):
            await service.update_task("WTB_001", "1", TaskUpdate(subtasks=[{"id": "2a"}]))

        mock_session.rollback.assert_awaited_once()
        assert "subtasks" not in stored_tasks(project_repo)[0]

    async def test_replacing_own_subtasks_may_keep_their_ids(self, service, project_repo, project):
        await service.update_task(
            "WTB_001", "2", TaskUpdate(subtasks=[{"id": "2a", "name": "Fibre"}, {"id": "2b"}])
        )

        assert [t["id"] for t in stored_tasks(project_repo)[1]["subtasks"]] == ["2a", "2b"]

    async def test_subtasks_cannot_reuse_the_task_own_id(self, service, project):
        with pytest.raises(ConflictError):
            await service.update_task("WTB_001", "2", TaskUpdate(subtasks=[{"id": 2}]))

    async def test_missing_task_rolls_back(self, service, project_repo, mock_session, project):
        with pytest.raises(TaskNotFoundError):
            await service.update_task("WTB_001", "404", TaskUpdate(name="x"))

        mock_session.rollback.assert_awaited_once()
        mock_session.commit.assert_not_awaited()
        assert project_repo.row("WTB_001")["version"] == 1

    async def test_delete_removes_subtree(self, service, project_repo, project):
        await service.delete_task("WTB_001", 2)

        assert [t["id"] for t in stored_tasks(project_repo)] == [1]

    async def test_delete_missing(self, service, project):
        with pytest.raises(TaskNotFoundError):
            await service.delete_task("WTB_001", "404")


class TestNotes:
    async def test_appends_to_thread(self, service, project_repo, project):
        note = await service.add_note(
            "WTB_001", "1", TaskNoteCreate(content="Access road flooded"), author="Dana"
        )

        assert note["author"] == "Dana"
        assert note["id"].startswith("n_")
        task = stored_tasks(project_repo)[0]
        assert task["notesThread"] == [note]
        assert task["updatedAt"] == note["timestamp"]

    async def test_explicit_author_wins(self, service, project):
        note = await service.add_note(
            "WTB_001", "1", TaskNoteCreate(content="ok", author="Site lead"), author="Dana"
        )

        assert note["author"] == "Site lead"


class TestTimeEntries:
    async def test_records_entry_and_hours(self, service, project_repo, project):
        outcome = await service.record_time_entry(
            "WTB_001", TimeEntryCreate(taskId=1, hours=3.5), employee="Dana"
        )

        assert outcome.entry["taskId"] == 1
        assert outcome.entry["employee"] == "Dana"
        assert outcome.entry["id"].startswith("TE_")
        assert outcome.hours.project_hours == Decimal("3.50")
        row = project_repo.row("WTB_001")
        assert row["actual_hours"] == Decimal("3.50")
        assert row["time_entries"] == [outcome.entry]
        assert row["tasks"][0]["actualHours"] == 3.5

    async def test_entry_stores_hours_as_number(self, service, project_repo, project):
        outcome = await service.record_time_entry(
            "WTB_001", TimeEntryCreate(taskId=1, hours="0.25"), employee="Dana"
        )

        assert outcome.entry["hours"] == 0.25
        assert stored_tasks(project_repo)[0]["actualHours"] == 0.25
        assert project_repo.row("WTB_001")["actual_hours"] == Decimal("0.25")

    async def test_nested_subtask_is_not_addressable(self, service, project):
        with pytest.raises(TaskNotFoundError):
            await service.record_time_entry(
                "WTB_001", TimeEntryCreate(taskId="2a", hours=1), employee="Dana"
            )

    async def test_child_project_hours_reach_parent(self, service, project_repo):
        project_repo.seed(
            ProjectFactory.build(id="WTB_002"),
            ProjectFactory.child_of(
                "WTB_002", id="WTB_002_A", tasks=[{"id": 1, "name": "Dig", "actualHours": 2}]
            ),
        )

        await service.record_time_entry(
            "WTB_002_A", TimeEntryCreate(taskId=1, hours=6), employee="Dana"
        )

        assert project_repo.row("WTB_002")["actual_hours"] == Decimal("8.00")


class TestConcurrency:
    async def test_retries_after_lost_write(self, service, project_repo, mock_session, project):
        project_repo.fail_next_writes = 1

        task = await service.create_task("WTB_001", TaskCreate(name="Commission"))

        assert project_repo.write_attempts == 2
        assert mock_session.rollback.await_count == 1
        mock_session.commit.assert_awaited_once()
        assert stored_tasks(project_repo)[-1]["id"] == task["id"]
        assert len(stored_tasks(project_repo)) == 3

    async def test_gives_up_after_max_attempts(
        self, service, project_repo, mock_session, project
    ):
        project_repo.fail_next_writes = 3

        with pytest.raises(ConcurrentUpdateError):
            await service.create_task("WTB_001", TaskCreate(name="Commission"))

        assert project_repo.write_attempts == 3
        mock_session.commit.assert_not_awaited()
        assert len(stored_tasks(project_repo)) == 2
