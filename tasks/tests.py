from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse

from rooms.models import Room

from . import services
from .models import Task


class TaskServiceTests(TestCase):
    def setUp(self):
        self.room = Room.objects.create(number="101")
        self.task = services.create_task(title="Replace light bulb", room=self.room)

    def test_new_task_is_open(self):
        self.assertEqual(self.task.status, Task.Status.OPEN)
        self.assertIsNone(self.task.completed_at)

    def test_finishing_a_task_stamps_completion(self):
        task = services.update_task(self.task.id, status=Task.Status.DONE)

        self.assertIsNotNone(task.completed_at)

    def test_completion_time_is_kept_on_later_edits(self):
        done = services.update_task(self.task.id, status=Task.Status.DONE)

        edited = services.update_task(self.task.id, assigned_to="Sam")

        self.assertEqual(edited.completed_at, done.completed_at)

    def test_reopening_clears_completion(self):
        services.update_task(self.task.id, status=Task.Status.DONE)

        task = services.update_task(self.task.id, status=Task.Status.OPEN)

        self.assertIsNone(task.completed_at)


class TaskEndpointTests(TestCase):
    def setUp(self):
        get_user_model().objects.create_user(
            username="housekeeping",
            email="housekeeping@example.com",
            password="pass1234",
            is_staff=True,
        )
        self.client.login(username="housekeeping", password="pass1234")

    def test_create_and_filter_tasks(self):
        response = self.client.post(
            reverse("task_create"),
            {"title": " Fix shower ", "status": Task.Status.DONE, "priority": Task.Priority.HIGH},
        )

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["title"], "Fix shower")
        self.assertIsNotNone(response.json()["completed_at"])

        services.create_task(title="Restock minibar")
        response = self.client.get(reverse("task_list"), {"status": "open"})

        self.assertEqual([task["title"] for task in response.json()["results"]], ["Restock minibar"])

    def test_missing_task(self):
        response = self.client.get(reverse("task_detail", kwargs={"task_id": 9999}))

        self.assertEqual(response.status_code, 404)
