from django.http import JsonResponse
from django.views.decorators.http import require_GET, require_POST

from hotelpos.api import (
    invalid_form_response,
    invalid_formset_response,
    json_endpoint,
    list_response,
)
from reservations.serializers import serialize_reservation

from . import services
from .forms import InvoiceCreateForm, InvoiceReservationFormSet, InvoiceStatusForm
from .serializers import serialize_invoice

RESERVATIONS_PREFIX = "reservations"


@require_GET
@json_endpoint
def open_invoices_view(request):
    results = []
    for invoice in services.get_open():
        data = serialize_invoice(invoice)
        data["reservations"] = [
            serialize_reservation(reservation, related=("room", "reservation_item"))
            for reservation in invoice.reservations.all()
        ]
        results.append(data)
    return list_response(results)


@require_GET
@json_endpoint
def invoice_detail_view(request, invoice_id: int):
    return JsonResponse(serialize_invoice(services.get_by_id(invoice_id)))


@require_POST
@json_endpoint
def invoice_create_view(request):
    form = InvoiceCreateForm(request.POST)
    if not form.is_valid():
        return invalid_form_response(form)

    reservations = []
    if f"{RESERVATIONS_PREFIX}-TOTAL_FORMS" in request.POST:
        formset = InvoiceReservationFormSet(request.POST, prefix=RESERVATIONS_PREFIX)
        if not formset.is_valid():
            return invalid_formset_response(formset, RESERVATIONS_PREFIX)
        reservations = [
            reservation_form.cleaned_data
            for reservation_form in formset
            if reservation_form.cleaned_data
        ]

    invoice = services.create_invoice_for_guest(reservations=reservations, **form.cleaned_data)
    return JsonResponse(serialize_invoice(invoice), status=201)


@require_POST
@json_endpoint
def invoice_status_view(request, invoice_id: int):
    form = InvoiceStatusForm(request.POST)
    if not form.is_valid():
        return invalid_form_response(form)
    invoice = services.update_status(invoice_id, form.cleaned_data["status"])
    return JsonResponse(serialize_invoice(invoice))
