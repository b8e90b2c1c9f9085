def serialize_item(item):
    return {
        "id": item.id,
        "name": item.name,
        "category": item.category,
        "price_usd": item.price_usd,
        "happy_hour_price_usd": item.happy_hour_price_usd,
        "stock_quantity": item.stock_quantity,
        "is_active": item.is_active,
        "ingredients": [
            {"name": ingredient.name, "quantity": ingredient.quantity, "unit": ingredient.unit}
            for ingredient in item.ingredients.all()
        ],
    }


def serialize_order(order):
    return {
        "id": order.id,
        "status": order.status,
        "happy_hour": order.happy_hour,
        "discount_usd": order.discount_usd,
        "sub_total_usd": order.sub_total_usd,
        "order_date": order.order_date,
        "reservation_id": order.reservation_id,
        "guest_id": order.guest_id,
        "invoice_id": order.invoice_id,
        "items": [
            {
                "item_id": line.item_id,
                "item_name": line.item.name,
                "quantity": line.quantity,
                "unit_price_usd": line.unit_price_usd,
                "sub_total_usd": line.sub_total_usd,
            }
            for line in order.items.all()
        ],
    }
