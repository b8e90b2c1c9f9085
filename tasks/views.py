from django.http import JsonResponse
from django.views.decorators.http import require_GET, require_POST

from hotelpos.api import invalid_form_response, json_endpoint, list_response

from . import services
from .forms import TaskForm
from .models import Task
from .serializers import serialize_task


@require_GET
@json_endpoint
def task_list_view(request):
    status = (request.GET.get("status") or "").strip().upper()
    if status not in Task.Status.values:
        status = None
    return list_response(serialize_task(task) for task in services.get_all(status=status))


@require_GET
@json_endpoint
def task_detail_view(request, task_id: int):
    return JsonResponse(serialize_task(services.get_by_id(task_id)))


@require_POST
@json_endpoint
def task_create_view(request):
    form = TaskForm(request.POST)
    if not form.is_valid():
        return invalid_form_response(form)
    task = services.create_task(**form.cleaned_data)
    return JsonResponse(serialize_task(task), status=201)


@require_POST
@json_endpoint
def task_update_view(request, task_id: int):
    task = services.get_by_id(task_id)
    form = TaskForm(request.POST, instance=task)
    if not form.is_valid():
        return invalid_form_response(form)
    task = services.update_task(task_id, **form.cleaned_data)
    return JsonResponse(serialize_task(task))
