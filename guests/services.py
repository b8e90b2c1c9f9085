import logging

from django.db import IntegrityError, transaction

from hotelpos.exceptions import Conflict, NotFound

from .models import Guest

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL_MESSAGE = (
    "A Guest account with this Email already exists. "
    "Please choose the existing guest and try again."
)


def get_all():
    return Guest.objects.select_related("current_reservation")


def get_by_id(guest_id) -> Guest:
    guest = Guest.objects.select_related("current_reservation").filter(id=guest_id).first()
    if guest is None:
        raise NotFound("Guest not found.")
    return guest


def find_by_email(email):
    return Guest.objects.filter(email__iexact=email.strip()).first()


def create_guest(*, first_name, surname="", email, **extra) -> Guest:
    email = email.strip().lower()
    if find_by_email(email):
        raise Conflict(DUPLICATE_EMAIL_MESSAGE)
    try:
        with transaction.atomic():
            guest = Guest.objects.create(
                first_name=first_name.strip(),
                surname=surname.strip(),
                email=email,
                **extra,
            )
    except IntegrityError as exc:
        raise Conflict(DUPLICATE_EMAIL_MESSAGE) from exc
    logger.info("Created guest %s (%s)", guest.id, guest.email)
    return guest


def update_guest(guest_id, **changes) -> Guest:
    guest = get_by_id(guest_id)
    email = changes.get("email")
    if email is not None:
        email = email.strip().lower()
        if Guest.objects.filter(email__iexact=email).exclude(id=guest.id).exists():
            raise Conflict(DUPLICATE_EMAIL_MESSAGE)
        changes["email"] = email
    for field, value in changes.items():
        setattr(guest, field, value)
    try:
        with transaction.atomic():
            guest.save()
    except IntegrityError as exc:
        raise Conflict(DUPLICATE_EMAIL_MESSAGE) from exc
    return guest
