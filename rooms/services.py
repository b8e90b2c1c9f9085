import logging

from django.db import transaction

from hotelpos.exceptions import NotFound

from .models import Room

logger = logging.getLogger(__name__)


def get_all(status=None):
    rooms = Room.objects.all()
    if status:
        rooms = rooms.filter(status=status)
    return rooms


def get_by_id(room_id) -> Room:
    room = Room.objects.filter(id=room_id).first()
    if room is None:
        raise NotFound("Room not found.")
    return room


def set_status(room_id, status) -> Room:
    with transaction.atomic():
        room = Room.objects.select_for_update().filter(id=room_id).first()
        if room is None:
            raise NotFound("Room not found.")
        if room.status != status:
            logger.info("Room %s: %s -> %s", room.number, room.status, status)
            room.status = status
            room.save(update_fields=["status"])
    return room
