from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import NewProject, NewTask, Project, ProjectFilters, ProjectStats, Task, TaskFilters, TaskView


class ProjectRepository(Protocol):
    """Repository interface for projects and their tasks.

    Tasks are owned through their project; deleting a project deletes its tasks.
    """

    def find_owned_project(self, *, account_id: int, project_id: int) -> Optional[Project]:
        raise NotImplementedError

    def list_projects(self, *, account_id: int, filters: ProjectFilters) -> Sequence[Project]:
        """Newest-updated first."""

        raise NotImplementedError

    def create_project(self, *, account_id: int, data: NewProject) -> int:
        raise NotImplementedError

    def update_project(self, project: Project) -> bool:
        raise NotImplementedError

    def delete_project(self, project_id: int) -> bool:
        raise NotImplementedError

    def project_stats(self, *, account_id: int) -> ProjectStats:
        raise NotImplementedError

    def find_owned_task(self, *, account_id: int, task_id: int) -> Optional[Task]:
        raise NotImplementedError

    def list_tasks(self, *, account_id: int, filters: TaskFilters) -> Sequence[TaskView]:
        raise NotImplementedError

    def create_task(self, data: NewTask) -> int:
        raise NotImplementedError

    def update_task(self, task: Task) -> bool:
        raise NotImplementedError

    def delete_task(self, task_id: int) -> bool:
        raise NotImplementedError
