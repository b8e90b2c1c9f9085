from django.http import JsonResponse
from django.views.decorators.http import require_GET, require_POST

from hotelpos.api import invalid_form_response, json_endpoint, list_response

from . import services
from .forms import GuestForm
from .serializers import serialize_guest


@require_GET
@json_endpoint
def guest_list_view(request):
    return list_response(serialize_guest(guest) for guest in services.get_all())


@require_GET
@json_endpoint
def guest_detail_view(request, guest_id: int):
    return JsonResponse(serialize_guest(services.get_by_id(guest_id)))


@require_POST
@json_endpoint
def guest_create_view(request):
    form = GuestForm(request.POST)
    if not form.is_valid():
        return invalid_form_response(form)
    guest = services.create_guest(**form.cleaned_data)
    return JsonResponse(serialize_guest(guest), status=201)


@require_POST
@json_endpoint
def guest_update_view(request, guest_id: int):
    services.get_by_id(guest_id)
    form = GuestForm(request.POST)
    if not form.is_valid():
        return invalid_form_response(form)
    guest = services.update_guest(guest_id, **form.cleaned_data)
    return JsonResponse(serialize_guest(guest))
