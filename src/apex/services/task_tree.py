"""Locate, update and remove tasks inside a project's task document.

A project's `tasks` is an ordered list of task dicts; any task may carry a
nested `subtasks` list. Identifiers are compared as strings, so 5 and "5"
name the same task. Every function here is total: a malformed tree (not a
list, non-dict entries, `subtasks` that is not a list) yields "not found"
instead of raising.
"""

from collections.abc import Iterator
from typing import Any, NamedTuple

Task = dict[str, Any]


class TaskLocation(NamedTuple):
    task: Task
    parent: Task | None  # None for root tasks


def same_id(left: Any, right: Any) -> bool:
    """Compare two task identifiers under string coercion."""
    if left is None or right is None:
        return False
    return str(left) == str(right)


def _walk(tasks: Any) -> Iterator[tuple[list[Any], int, Task, Task | None]]:
    """Yield (container, index, task, parent) depth-first in document order.

    Iterative so deeply nested trees cannot hit the recursion limit.
    """
    if not isinstance(tasks, list):
        return
    stack: list[tuple[list[Any], Task | None, Iterator[tuple[int, Any]]]] = [
        (tasks, None, iter(enumerate(tasks)))
    ]
    while stack:
        container, parent, entries = stack[-1]
        for index, task in entries:
            if not isinstance(task, dict):
                continue
            yield container, index, task, parent
            subtasks = task.get("subtasks")
            if isinstance(subtasks, list) and subtasks:
                stack.append((subtasks, task, iter(enumerate(subtasks))))
                break
        else:
            stack.pop()


def iter_tasks(tasks: Any) -> Iterator[Task]:
    """Every task in the tree, depth-first in document order."""
    for _, _, task, _ in _walk(tasks):
        yield task


def count_tasks(tasks: Any) -> int:
    return sum(1 for _ in iter_tasks(tasks))


def find_task(tasks: Any, task_id: Any) -> TaskLocation | None:
    """First task in document order whose id matches, with its immediate parent."""
    for _, _, task, parent in _walk(tasks):
        if same_id(task.get("id"), task_id):
            return TaskLocation(task=task, parent=parent)
    return None


def remove_task(tasks: Any, task_id: Any) -> bool:
    """Delete the first matching task from whichever list holds it.

    Removal is positional, so a second task with the same id survives.
    Subtasks of the removed task go with it.
    """
    for container, index, task, _ in _walk(tasks):
        if same_id(task.get("id"), task_id):
            del container[index]
            return True
    return False


def update_task(tasks: Any, task_id: Any, changes: Task) -> Task | None:
    """Merge changes into the first matching task and return it.

    The identifier is never overwritten.
    """
    location = find_task(tasks, task_id)
    if location is None:
        return None
    location.task.update({key: value for key, value in changes.items() if key != "id"})
    return location.task


def add_subtask(tasks: Any, parent_id: Any, subtask: Task) -> Task | None:
    """Append a task to the `subtasks` list of the first matching task.

    Returns the parent task, or None when it does not exist. A missing or
    malformed `subtasks` value is replaced by a new list.
    """
    location = find_task(tasks, parent_id)
    if location is None:
        return None
    subtasks = location.task.get("subtasks")
    if not isinstance(subtasks, list):
        subtasks = []
        location.task["subtasks"] = subtasks
    subtasks.append(subtask)
    return location.task


def contains_id(tasks: Any, task_id: Any) -> bool:
    return find_task(tasks, task_id) is not None


def first_clashing_id(existing: Any, incoming: Any) -> Any | None:
    """First id in the `incoming` tree already used in `existing` or earlier in `incoming`.

    Tasks without an id are skipped; ids compare as strings.
    """
    taken = {str(task["id"]) for task in iter_tasks(existing) if task.get("id") is not None}
    for task in iter_tasks(incoming):
        task_id = task.get("id")
        if task_id is None:
            continue
        if str(task_id) in taken:
            return task_id
        taken.add(str(task_id))
    return None
