from django.http import JsonResponse
from django.views.decorators.http import require_GET, require_POST

from hotelpos.api import (
    invalid_form_response,
    invalid_formset_response,
    json_endpoint,
    list_response,
)

from . import services
from .forms import ItemForm, OrderCreateForm, OrderLineFormSet, OrderStatusForm
from .serializers import serialize_item, serialize_order

LINES_PREFIX = "items"


@require_GET
@json_endpoint
def item_list_view(request):
    include_inactive = request.GET.get("all") == "1"
    return list_response(
        serialize_item(item) for item in services.get_items(include_inactive=include_inactive)
    )


@require_GET
@json_endpoint
def item_detail_view(request, item_id: int):
    return JsonResponse(serialize_item(services.get_item(item_id)))


@require_POST
@json_endpoint
def item_create_view(request):
    form = ItemForm(request.POST)
    if not form.is_valid():
        return invalid_form_response(form)
    item = services.create_item(**form.cleaned_data)
    return JsonResponse(serialize_item(item), status=201)


@require_POST
@json_endpoint
def item_update_view(request, item_id: int):
    services.get_item(item_id)
    form = ItemForm(request.POST)
    if not form.is_valid():
        return invalid_form_response(form)
    item = services.update_item(item_id, **form.cleaned_data)
    return JsonResponse(serialize_item(item))


@require_GET
@json_endpoint
def open_orders_view(request):
    return list_response(serialize_order(order) for order in services.get_open_orders())


@require_GET
@json_endpoint
def order_detail_view(request, order_id: int):
    return JsonResponse(serialize_order(services.get_order(order_id)))


@require_POST
@json_endpoint
def order_create_view(request):
    form = OrderCreateForm(request.POST)
    formset = OrderLineFormSet(request.POST, prefix=LINES_PREFIX)
    if not form.is_valid():
        return invalid_form_response(form)
    if not formset.is_valid():
        return invalid_formset_response(formset, LINES_PREFIX)

    order = services.create_order(
        lines=[line_form.cleaned_data for line_form in formset],
        **form.cleaned_data,
    )
    return JsonResponse(serialize_order(services.get_order(order.id)), status=201)


@require_POST
@json_endpoint
def order_status_view(request, order_id: int):
    form = OrderStatusForm(request.POST)
    if not form.is_valid():
        return invalid_form_response(form)
    services.update_order_status(order_id, form.cleaned_data["status"])
    return JsonResponse(serialize_order(services.get_order(order_id)))
