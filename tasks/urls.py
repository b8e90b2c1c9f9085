from django.urls import path

from . import views

urlpatterns = [
    path("", views.task_list_view, name="task_list"),
    path("create/", views.task_create_view, name="task_create"),
    path("<int:task_id>/", views.task_detail_view, name="task_detail"),
    path("<int:task_id>/update/", views.task_update_view, name="task_update"),
]
