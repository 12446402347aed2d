"""Todoist task list widget."""

from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional, Union
from urllib.parse import quote

import httpx
from loguru import logger


API_URL = "https://api.todoist.com/rest/v2"
MAX_TASKS = 12

NOT_CONFIGURED = "Configure in settings"
UNAVAILABLE = "Tasks unavailable"
NO_TASKS = "No tasks"


@dataclass(frozen=True)
class TaskItem:
    id: str
    content: str
    due: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "TaskItem":
        due = data.get("due") or {}
        return cls(
            id=str(data.get("id", "")),
            content=data.get("content") or "(Untitled)",
            due=due.get("date"),
        )


@dataclass(frozen=True)
class TaskList:
    items: List[TaskItem]
    remaining: int

    @property
    def label(self) -> str:
        return count_label(self.remaining)


def count_label(count: int) -> str:
    return f"{count} task{'' if count == 1 else 's'}"


def parse_due(value: Optional[str]) -> Optional[date]:
    """Todoist due dates are YYYY-MM-DD or a full ISO timestamp."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def due_timestamp(value: Optional[str]) -> Optional[float]:
    """
    Epoch seconds for sorting. A bare date counts as midnight UTC, a
    timestamp without an offset as local time.
    """
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if len(value) == 10:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.timestamp()


def sort_tasks(tasks: List[TaskItem]) -> List[TaskItem]:
    """By due time ascending, undated last; stable otherwise."""
    def key(task: TaskItem):
        ts = due_timestamp(task.due)
        return (ts is None, ts or 0.0)
    return sorted(tasks, key=key)


def format_due_label(due: Optional[str], today: Optional[date] = None) -> str:
    due_date = parse_due(due)
    if due_date is None:
        return "No date"
    today = today or date.today()
    diff = (due_date - today).days
    if diff == 0:
        return "Today"
    if diff == 1:
        return "Tomorrow"
    if diff < 0:
        return "Overdue"
    return f"{due_date:%a}, {due_date:%b} {due_date.day}"


def _headers(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


async def fetch_tasks(
    token: str,
    client: httpx.AsyncClient,
    timeout: float = 5.0,
) -> Union[TaskList, str]:
    """
    Fetch open tasks, soonest first.

    Returns the fallback text instead of a TaskList when there is no token
    or the request fails.
    """
    if not token:
        return NOT_CONFIGURED

    try:
        response = await client.get(f"{API_URL}/tasks", headers=_headers(token), timeout=timeout)
        response.raise_for_status()
        tasks = [TaskItem.from_api(t) for t in response.json()]
    except httpx.HTTPError as e:
        logger.warning(f"Task request failed: {e}")
        return UNAVAILABLE
    except (ValueError, TypeError, AttributeError) as e:
        logger.error(f"Unexpected task payload: {e}")
        return UNAVAILABLE

    ordered = sort_tasks(tasks)
    return TaskList(items=ordered[:MAX_TASKS], remaining=len(ordered))


async def close_task(token: str, task_id: str, client: httpx.AsyncClient, timeout: float = 5.0) -> bool:
    """Mark a task complete. False on any failure so the host can re-enable it."""
    try:
        response = await client.post(
            f"{API_URL}/tasks/{quote(str(task_id), safe='')}/close",
            headers={**_headers(token), "Content-Type": "application/json"},
            timeout=timeout,
        )
    except httpx.HTTPError as e:
        logger.warning(f"Closing task {task_id} failed: {e}")
        return False
    return response.is_success
