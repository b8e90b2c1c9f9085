from guests.serializers import serialize_guest


def serialize_line_item(line_item):
    return {
        "id": line_item.id,
        "description": line_item.description,
        "quantity": line_item.quantity,
        "unit_price_usd": line_item.unit_price_usd,
        "sub_total_usd": line_item.sub_total_usd,
    }


def serialize_invoice(invoice, *, include_guest=True):
    data = {
        "id": invoice.id,
        "invoice_number": invoice.invoice_number,
        "customer_name": invoice.customer_name,
        "customer_email": invoice.customer_email,
        "guest_id": invoice.guest_id,
        "total_usd": invoice.total_usd,
        "remaining_balance_usd": invoice.remaining_balance_usd,
        "status": invoice.status,
        "created_at": invoice.created_at,
    }
    if include_guest and invoice.guest is not None:
        data["guest"] = serialize_guest(invoice.guest)
    return data
