"""Best-effort widgets around the command bar: weather, tasks, icons."""

from .icons import icon_candidates
from .tasks import TaskList, close_task, fetch_tasks
from .weather import WeatherReport, fetch_weather

__all__ = [
    "TaskList",
    "WeatherReport",
    "close_task",
    "fetch_tasks",
    "fetch_weather",
    "icon_candidates",
]
