import logging
from decimal import Decimal

from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import F
from django.utils import timezone

from guests.models import Guest
from hotelpos.exceptions import Conflict, NotFound, Unprocessable
from invoices.models import Invoice, PaymentStatus
from invoices.reconciliation import recompute_invoice_totals, recompute_many
from reservations.models import Reservation

from .models import Item, ItemOrder, Order

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")


def start_of_day(now=None):
    now = timezone.localtime(now)
    return now.replace(hour=0, minute=0, second=0, microsecond=0)


def is_happy_hour(now=None) -> bool:
    current = timezone.localtime(now).time()
    return settings.HAPPY_HOUR_START <= current < settings.HAPPY_HOUR_END


def get_items(*, include_inactive=False):
    items = Item.objects.prefetch_related("ingredients")
    if not include_inactive:
        items = items.filter(is_active=True)
    return items


def get_item(item_id) -> Item:
    item = Item.objects.prefetch_related("ingredients").filter(id=item_id).first()
    if item is None:
        raise NotFound("Item not found.")
    return item


def create_item(**fields) -> Item:
    try:
        with transaction.atomic():
            item = Item.objects.create(**fields)
    except IntegrityError as exc:
        raise Conflict("An item with this name already exists.") from exc
    return item


def update_item(item_id, **changes) -> Item:
    item = get_item(item_id)
    for field, value in changes.items():
        setattr(item, field, value)
    try:
        with transaction.atomic():
            item.save()
    except IntegrityError as exc:
        raise Conflict("An item with this name already exists.") from exc
    return item


def get_open_orders():
    return (
        Order.objects.filter(status=PaymentStatus.UNPAID)
        .select_related("guest", "reservation", "reservation__room")
        .prefetch_related("items__item")
    )


def get_order(order_id) -> Order:
    order = (
        Order.objects.select_related("guest", "reservation", "invoice")
        .prefetch_related("items__item")
        .filter(id=order_id)
        .first()
    )
    if order is None:
        raise NotFound("Order not found.")
    return order


def create_order_record(*, lines=(), **fields) -> Order:
    """Insert an order with its lines, dated to the start of today, and reconcile its invoice."""
    with transaction.atomic():
        order = Order(**fields)
        order.order_date = start_of_day()
        order.save()
        ItemOrder.objects.bulk_create(ItemOrder(order=order, **line) for line in lines)
        if order.invoice_id:
            recompute_invoice_totals(order.invoice_id)
    return order


def update_order(order_id, *, strict=None, **changes) -> Order:
    with transaction.atomic():
        order = Order.objects.select_for_update().filter(id=order_id).first()
        if order is None:
            raise NotFound("Order not found.")
        previous_invoice_id = order.invoice_id
        previous_status = order.status
        previous_sub_total = order.sub_total_usd

        for field, value in changes.items():
            setattr(order, field, value)
        order.save()

        invoice_ids = []
        if order.status != previous_status or order.sub_total_usd != previous_sub_total:
            invoice_ids.append(previous_invoice_id)
        if order.invoice_id != previous_invoice_id:
            invoice_ids.extend([previous_invoice_id, order.invoice_id])
        recompute_many(invoice_ids, strict=strict)
    return order


def update_order_status(order_id, status) -> Order:
    return update_order(order_id, status=status)


def _merge_lines(lines):
    quantities = {}
    for line in lines:
        item_id = int(line["item_id"])
        quantities[item_id] = quantities.get(item_id, 0) + int(line["quantity"])
    return quantities


def create_order(
    *,
    lines,
    guest_id=None,
    reservation_id=None,
    invoice_id=None,
    happy_hour=None,
    discount_usd=ZERO,
) -> Order:
    """Sell items at the bar or restaurant.

    ``lines`` is a list of ``{"item_id": ..., "quantity": ...}``. Happy-hour
    prices apply when ``happy_hour`` is true, or when it is None and the
    current time falls in the happy-hour window. Guest and invoice default to
    those of the reservation, so room charges land on the guest's bill.
    """
    quantities = _merge_lines(lines)
    if not quantities:
        raise Unprocessable("An order needs at least one item.")

    with transaction.atomic():
        reservation = None
        if reservation_id:
            reservation = Reservation.objects.filter(id=reservation_id).first()
            if reservation is None:
                raise NotFound("Reservation not found.")

        guest = None
        if guest_id:
            guest = Guest.objects.filter(id=guest_id).first()
            if guest is None:
                raise NotFound("Guest not found.")
        elif reservation is not None:
            guest = reservation.guest

        if invoice_id:
            if not Invoice.objects.filter(id=invoice_id).exists():
                raise NotFound("Invoice not found.")
        elif reservation is not None:
            invoice_id = reservation.invoice_id

        if happy_hour is None:
            happy_hour = is_happy_hour()

        items = Item.objects.select_for_update().in_bulk(list(quantities))
        line_fields = []
        sub_total = ZERO
        for item_id, quantity in quantities.items():
            item = items.get(item_id)
            if item is None:
                raise NotFound(f"Item {item_id} not found.")
            if not item.is_active:
                raise Unprocessable(f"{item.name} is not available.")
            if item.stock_quantity is not None:
                if item.stock_quantity < quantity:
                    raise Unprocessable(f"Only {item.stock_quantity} x {item.name} left in stock.")
                Item.objects.filter(id=item.id).update(stock_quantity=F("stock_quantity") - quantity)

            unit_price = item.unit_price(happy_hour=happy_hour)
            line_total = unit_price * quantity
            sub_total += line_total
            line_fields.append(
                {
                    "item": item,
                    "quantity": quantity,
                    "unit_price_usd": unit_price,
                    "sub_total_usd": line_total,
                }
            )

        discount_usd = discount_usd or ZERO
        order = create_order_record(
            lines=line_fields,
            happy_hour=happy_hour,
            discount_usd=discount_usd,
            sub_total_usd=max(sub_total - discount_usd, ZERO),
            reservation=reservation,
            guest=guest,
            invoice_id=invoice_id,
        )

    logger.info(
        "Order %s: %s line(s), sub-total %s%s",
        order.id,
        len(line_fields),
        order.sub_total_usd,
        " (happy hour)" if happy_hour else "",
    )
    return order
