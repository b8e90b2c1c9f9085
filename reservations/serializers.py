from guests.serializers import serialize_guest
from invoices.serializers import serialize_invoice, serialize_line_item
from rooms.serializers import serialize_room


def serialize_reservation_item(reservation_item):
    return {
        "id": reservation_item.id,
        "description": reservation_item.description,
        "room_type": reservation_item.room_type,
        "room_variant": reservation_item.room_variant,
        "board_type": reservation_item.board_type,
        "daily_rate_usd": reservation_item.daily_rate_usd,
    }


def serialize_reservation(reservation, *, related=()):
    """``related`` names the relations to embed: room, guest, reservation_item, invoice."""
    data = {
        "id": reservation.id,
        "guest_name": reservation.guest_name,
        "guest_email": reservation.guest_email,
        "check_in": reservation.check_in,
        "check_out": reservation.check_out,
        "status": reservation.status,
        "payment_status": reservation.payment_status,
        "sub_total_usd": reservation.sub_total_usd,
        "room_id": reservation.room_id,
        "guest_id": reservation.guest_id,
        "reservation_item_id": reservation.reservation_item_id,
        "invoice_id": reservation.invoice_id,
    }
    if "room" in related:
        data["room"] = serialize_room(reservation.room) if reservation.room else None
    if "guest" in related:
        data["guest"] = serialize_guest(reservation.guest) if reservation.guest else None
    if "reservation_item" in related:
        data["reservation_item"] = (
            serialize_reservation_item(reservation.reservation_item)
            if reservation.reservation_item
            else None
        )
    if "invoice" in related:
        if reservation.invoice is None:
            data["invoice"] = None
        else:
            data["invoice"] = serialize_invoice(reservation.invoice, include_guest=False)
            data["invoice"]["line_items"] = [
                serialize_line_item(line_item)
                for line_item in reservation.invoice.line_items.all()
            ]
    return data
