from django.db import transaction
from django.utils import timezone

from hotelpos.exceptions import NotFound

from .models import Task


def get_all(status=None):
    tasks = Task.objects.select_related("room")
    if status:
        tasks = tasks.filter(status=status)
    return tasks


def get_by_id(task_id) -> Task:
    task = Task.objects.select_related("room").filter(id=task_id).first()
    if task is None:
        raise NotFound("Task not found.")
    return task


def stamp_completion(task, now=None):
    if task.status == Task.Status.DONE:
        task.completed_at = task.completed_at or now or timezone.now()
    else:
        task.completed_at = None


def create_task(**fields) -> Task:
    task = Task(**fields)
    stamp_completion(task)
    task.save()
    return task


def update_task(task_id, **changes) -> Task:
    with transaction.atomic():
        task = Task.objects.select_for_update().filter(id=task_id).first()
        if task is None:
            raise NotFound("Task not found.")
        for field, value in changes.items():
            setattr(task, field, value)
        stamp_completion(task)
        task.save()
    return task
