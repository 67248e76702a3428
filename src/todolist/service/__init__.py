from .tasks import TaskService, local_now

__all__ = ["TaskService", "local_now"]
