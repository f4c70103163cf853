import math
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Tuple, Union


ADMIN_BOOKING_TYPE = "admin"

ROOM_TYPE_CHOICES = [
    ("entire", "Entire Apartment"),
    ("room1", "Room 1"),
    ("room2", "Room 2"),
]
DEFAULT_ROOM_TYPE = "entire"

SECONDS_PER_DAY = 60 * 60 * 24


@dataclass
class AdminBlock:
    """Даты, закрытые администратором (без гостя и оплаты)."""

    id: Union[int, str]
    room_type: str
    check_in: datetime
    check_out: datetime
    notes: str = ""
    booking_type: str = ADMIN_BOOKING_TYPE

    @property
    def nights(self) -> int:
        return nights(self.check_in, self.check_out)


@dataclass
class UserBooking:
    """Обычная бронь гостя."""

    id: Union[int, str]
    room_type: str
    check_in: datetime
    check_out: datetime
    booking_type: str = ""
    name: str = ""
    email: str = ""
    phone: str = ""
    # нечисловые значения от бэкенда ("2 adults", "45,000") хранятся как есть
    guests: Union[int, str, None] = None
    price: Union[Decimal, str, None] = None
    id_type: str = ""
    payment_status: str = ""

    @property
    def nights(self) -> int:
        return nights(self.check_in, self.check_out)

    @property
    def is_paid(self) -> bool:
        return self.payment_status == "paid"


Record = Union[AdminBlock, UserBooking]


def is_admin_block(booking_type: Optional[str]) -> bool:
    return booking_type == ADMIN_BOOKING_TYPE


def nights(check_in: datetime, check_out: datetime) -> int:
    """
    Количество ночей = потолок разницы в днях.
    Порядок дат не проверяем: если выезд раньше заезда, число будет отрицательным.
    """
    delta = check_out - check_in
    return math.ceil(delta.total_seconds() / SECONDS_PER_DAY)


def partition(records: List[Record]) -> Tuple[List[AdminBlock], List[UserBooking]]:
    """
    Делим записи на блокировки админа и брони гостей за один проход.
    Порядок из ответа сервера сохраняется внутри каждой группы.
    """
    admin_blocks: List[AdminBlock] = []
    user_bookings: List[UserBooking] = []

    for record in records:
        if isinstance(record, AdminBlock):
            admin_blocks.append(record)
        else:
            user_bookings.append(record)

    return admin_blocks, user_bookings
