def serialize_guest(guest):
    return {
        "id": guest.id,
        "first_name": guest.first_name,
        "surname": guest.surname,
        "full_name": guest.full_name,
        "email": guest.email,
        "phone": guest.phone,
        "guest_type": guest.guest_type,
        "current_reservation_id": guest.current_reservation_id,
        "credit_balance_usd": guest.credit_balance_usd,
    }
