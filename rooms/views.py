from django.http import JsonResponse
from django.views.decorators.http import require_GET, require_POST

from hotelpos.api import invalid_form_response, json_endpoint, list_response

from . import services
from .forms import RoomForm, RoomStatusForm
from .models import Room
from .serializers import serialize_room


@require_GET
@json_endpoint
def room_list_view(request):
    status = (request.GET.get("status") or "").strip().upper()
    if status not in Room.Status.values:
        status = None
    return list_response(serialize_room(room) for room in services.get_all(status=status))


@require_GET
@json_endpoint
def room_detail_view(request, room_id: int):
    return JsonResponse(serialize_room(services.get_by_id(room_id)))


@require_POST
@json_endpoint
def room_create_view(request):
    form = RoomForm(request.POST)
    if not form.is_valid():
        return invalid_form_response(form)
    room = form.save()
    return JsonResponse(serialize_room(room), status=201)


@require_POST
@json_endpoint
def room_update_view(request, room_id: int):
    room = services.get_by_id(room_id)
    form = RoomForm(request.POST, instance=room)
    if not form.is_valid():
        return invalid_form_response(form)
    room = form.save()
    return JsonResponse(serialize_room(room))


@require_POST
@json_endpoint
def room_status_view(request, room_id: int):
    form = RoomStatusForm(request.POST)
    if not form.is_valid():
        return invalid_form_response(form)
    room = services.set_status(room_id, form.cleaned_data["status"])
    return JsonResponse(serialize_room(room))
