from django.http import JsonResponse
from django.views.decorators.http import require_GET, require_POST

from hotelpos.api import invalid_form_response, json_endpoint, list_response
from invoices.serializers import serialize_invoice, serialize_line_item
from pos.serializers import serialize_order

from . import services
from .forms import CheckInForm, ReservationCreateForm, StayDatesForm
from .serializers import serialize_reservation, serialize_reservation_item


@require_GET
@json_endpoint
def reservation_list_view(request):
    return list_response(serialize_reservation(reservation) for reservation in services.get_all())


@require_GET
@json_endpoint
def reservation_item_list_view(request):
    return list_response(
        serialize_reservation_item(reservation_item)
        for reservation_item in services.get_reservation_items()
    )


@require_GET
@json_endpoint
def reservation_detail_view(request, reservation_id: int):
    reservation = services.get_by_id(reservation_id)
    data = serialize_reservation(reservation, related=("room", "reservation_item"))
    data["orders"] = [serialize_order(order) for order in reservation.orders.all()]
    guest = reservation.guest
    if guest is None:
        data["guest"] = None
    else:
        data["guest"] = {
            "id": guest.id,
            "full_name": guest.full_name,
            "email": guest.email,
            "orders": [
                {
                    "id": order.id,
                    "status": order.status,
                    "sub_total_usd": order.sub_total_usd,
                    "item_count": len(order.items.all()),
                }
                for order in guest.orders.all()
            ],
            "invoices": [
                {
                    **serialize_invoice(invoice, include_guest=False),
                    "line_items": [
                        serialize_line_item(line_item) for line_item in invoice.line_items.all()
                    ],
                }
                for invoice in guest.invoices.all()
            ],
        }
    return JsonResponse(data)


@require_GET
@json_endpoint
def active_reservations_view(request):
    return list_response(
        serialize_reservation(reservation, related=("room", "guest", "invoice"))
        for reservation in services.get_active_reservations()
    )


@require_GET
@json_endpoint
def room_reservations_view(request, room_id: int):
    return list_response(
        serialize_reservation(reservation, related=("room",))
        for reservation in services.get_room_reservations(room_id)
    )


@require_GET
@json_endpoint
def reservation_order_total_view(request, reservation_id: int):
    total = services.aggregate_order_total(reservation_id)
    return JsonResponse({"reservation_id": reservation_id, "order_total_usd": total})


@require_POST
@json_endpoint
def reservation_create_view(request):
    form = ReservationCreateForm(request.POST)
    if not form.is_valid():
        return invalid_form_response(form)
    reservation = services.create_reservation(**form.cleaned_data)
    return JsonResponse(
        serialize_reservation(reservation, related=("room", "reservation_item", "invoice")),
        status=201,
    )


@require_POST
@json_endpoint
def reservation_check_in_view(request, reservation_id: int):
    form = CheckInForm(request.POST)
    if not form.is_valid():
        return invalid_form_response(form)
    reservation = services.check_in(reservation_id, **form.cleaned_data)
    return JsonResponse(
        serialize_reservation(reservation, related=("room", "guest", "reservation_item", "invoice"))
    )


@require_POST
@json_endpoint
def reservation_calculate_sub_total_view(request, reservation_id: int):
    form = StayDatesForm(request.POST)
    if not form.is_valid():
        return invalid_form_response(form)
    reservation = services.calculate_sub_total(reservation_id, **form.cleaned_data)
    return JsonResponse(serialize_reservation(reservation))


@require_POST
@json_endpoint
def reservation_check_out_view(request, reservation_id: int):
    reservation = services.check_out(reservation_id)
    return JsonResponse(serialize_reservation(reservation, related=("room",)))


@require_POST
@json_endpoint
def reservation_cancel_view(request, reservation_id: int):
    reservation = services.cancel_reservation(reservation_id)
    return JsonResponse(serialize_reservation(reservation))
