def serialize_room(room):
    return {
        "id": room.id,
        "number": room.number,
        "room_type": room.room_type,
        "variant": room.variant,
        "status": room.status,
        "capacity": room.capacity,
        "daily_rate_usd": room.daily_rate_usd,
    }
