import logging
import time
from dataclasses import asdict, dataclass, field
from typing import List, Optional

from django.conf import settings
from django.core.cache import cache
from rest_framework import serializers

from api.client import (
    ApplicationError,
    BookAStayClient,
    InvalidRequestError,
    TransportError,
)
from api.records import DEFAULT_ROOM_TYPE, Record, partition
from api.serializers import dump_records, parse_records

logger = logging.getLogger(__name__)


SUCCESS = "success"
ERROR = "error"

TAB_BLOCK = "block"
TAB_BOOKINGS = "bookings"
TABS = (TAB_BLOCK, TAB_BOOKINGS)

SESSION_KEY = "bookastay_dashboard"


# ---------- Состояние страницы ----------


@dataclass
class Message:
    """Временный баннер (успех / ошибка), живёт BOOKASTAY_MESSAGE_TTL секунд."""

    level: str
    text: str
    expires_at: float

    @property
    def is_success(self) -> bool:
        return self.level == SUCCESS

    def is_active(self, now: float) -> bool:
        return now < self.expires_at


@dataclass
class BlockForm:
    room_type: str = DEFAULT_ROOM_TYPE
    check_in_date: str = ""
    check_out_date: str = ""
    reason: str = ""

    @classmethod
    def from_data(cls, data) -> "BlockForm":
        return cls(
            room_type=data.get("room_type") or DEFAULT_ROOM_TYPE,
            check_in_date=(data.get("check_in_date") or "").strip(),
            check_out_date=(data.get("check_out_date") or "").strip(),
            reason=data.get("reason") or "",
        )

    def has_dates(self) -> bool:
        return bool(self.check_in_date and self.check_out_date)

    def as_payload(self) -> dict:
        return asdict(self)


@dataclass
class DashboardState:
    records: List[Record] = field(default_factory=list)
    loading: bool = False
    message: Optional[Message] = None
    form: BlockForm = field(default_factory=BlockForm)
    active_tab: str = TAB_BLOCK
    # номер последней загрузки списка; ответы старых загрузок отбрасываются
    generation: int = 0
    # список уже перезагружен действием, следующий показ страницы не грузит его повторно
    reloaded: bool = False

    @property
    def admin_blocks(self):
        return partition(self.records)[0]

    @property
    def user_bookings(self):
        return partition(self.records)[1]

    def active_message(self, now: float) -> Optional[Message]:
        if self.message and not self.message.is_active(now):
            self.message = None
        return self.message

    def to_dict(self) -> dict:
        # loading не сохраняем: между запросами страница всегда в idle
        return {
            "records": dump_records(self.records),
            "message": asdict(self.message) if self.message else None,
            "form": asdict(self.form),
            "active_tab": self.active_tab,
            "generation": self.generation,
            "reloaded": self.reloaded,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "DashboardState":
        message = data.get("message")
        return cls(
            records=parse_records(data.get("records") or []),
            message=Message(**message) if message else None,
            form=BlockForm(**(data.get("form") or {})),
            active_tab=data.get("active_tab") or TAB_BLOCK,
            generation=data.get("generation") or 0,
            reloaded=bool(data.get("reloaded")),
        )


def load_state(session) -> DashboardState:
    data = session.get(SESSION_KEY)
    if not data:
        return DashboardState()
    try:
        return DashboardState.from_dict(data)
    except (serializers.ValidationError, TypeError):
        logger.warning("Dropping unreadable dashboard state from session")
        return DashboardState()


def save_state(session, state: DashboardState):
    session[SESSION_KEY] = state.to_dict()


# ---------- Номера загрузок ----------


class LocalGenerations:
    """Номера загрузок внутри одного DashboardState (без общего хранилища)."""

    def __init__(self, state: DashboardState):
        self.state = state

    def issue(self) -> int:
        return self.state.generation + 1

    def latest(self) -> int:
        return self.state.generation


class SharedGenerations:
    """
    Общий счётчик загрузок для всех запросов одной сессии.
    Живёт в кэше Django: incr атомарный, поэтому два параллельных запроса
    никогда не получат один и тот же номер.
    """

    def __init__(self, session_key: str, start: int = 0, timeout=None):
        self.key = f"bookastay:generation:{session_key}"
        self.start = start
        self.timeout = timeout if timeout is not None else settings.SESSION_COOKIE_AGE

    def issue(self) -> int:
        cache.add(self.key, self.start, self.timeout)
        try:
            return cache.incr(self.key)
        except ValueError:
            # ключ истёк между add и incr
            cache.set(self.key, self.start + 1, self.timeout)
            return self.start + 1

    def latest(self) -> int:
        return cache.get(self.key, self.start)


# ---------- Действия ----------


class DashboardController:
    """
    Единственный владелец DashboardState.
    Каждое действие: idle -> запрос -> успех/ошибка -> idle,
    результат показывается временным сообщением.
    """

    def __init__(
        self, client=None, state=None, clock=time.time, message_ttl=None, generations=None
    ):
        self.client = client or BookAStayClient()
        self.state = state or DashboardState()
        self.generations = generations or LocalGenerations(self.state)
        # сообщение, с которым состояние пришло из сессии
        self.initial_message = self.state.message
        self.clock = clock
        self.message_ttl = (
            message_ttl if message_ttl is not None else settings.BOOKASTAY_MESSAGE_TTL
        )

    def show_message(self, level: str, text: str):
        self.state.message = Message(
            level=level, text=text, expires_at=self.clock() + self.message_ttl
        )

    def current_message(self) -> Optional[Message]:
        return self.state.active_message(self.clock())

    def select_tab(self, tab):
        if tab in TABS:
            self.state.active_tab = tab

    # ---------- Загрузка списка ----------

    def mount(self):
        """Показ страницы: грузим список, если действие только что этого не сделало."""
        if self.state.reloaded:
            self.state.reloaded = False
            return
        self.fetch_bookings()

    def fetch_bookings(self) -> bool:
        ticket = self.generations.issue()
        self.state.generation = ticket
        self.state.loading = True

        try:
            records = self.client.list_bookings()
        except ApplicationError:
            if self._is_current(ticket):
                self.show_message(ERROR, "Failed to fetch bookings")
            return False
        except TransportError:
            logger.exception("Error fetching bookings")
            if self._is_current(ticket):
                self.show_message(ERROR, "Error loading bookings")
            return False
        finally:
            if self._is_current(ticket):
                self.state.loading = False

        if not self._is_current(ticket):
            logger.debug("Discarding superseded bookings load #%s", ticket)
            return False

        # полная замена, без слияния
        self.state.records = records
        return True

    def reload(self) -> bool:
        loaded = self.fetch_bookings()
        self.state.reloaded = True
        return loaded

    def refresh(self) -> bool:
        return self.reload()

    def _is_current(self, ticket: int) -> bool:
        return ticket == self.generations.latest()

    def is_superseded(self) -> bool:
        """После этой загрузки в сессии уже стартовала более новая."""
        return self.state.generation < self.generations.latest()

    def adopt_newer(self, newer: DashboardState):
        """
        Записи берём у более новой загрузки, форму и вкладку оставляем свои.
        Сообщение тоже берём оттуда, если этот запрос своего не показал.
        """
        self.state.records = newer.records
        if self.state.message == self.initial_message:
            self.state.message = newer.message
        self.state.generation = max(newer.generation, self.state.generation)

    # ---------- Блокировка дат ----------

    def block_date(self, data=None) -> bool:
        form = self.state.form if data is None else BlockForm.from_data(data)
        # введённые значения остаются в форме до успешной отправки
        self.state.form = form

        if not form.has_dates():
            self.show_message(ERROR, "Please select check-in and check-out dates")
            return False

        self.state.loading = True
        try:
            self.client.block_date(form.as_payload())
        except InvalidRequestError as exc:
            self.show_message(ERROR, exc.message)
            return False
        except ApplicationError as exc:
            self.show_message(ERROR, exc.message or "Failed to block date")
            return False
        except TransportError:
            logger.exception("Error blocking date")
            self.show_message(ERROR, "Error blocking date")
            return False
        finally:
            self.state.loading = False

        self.show_message(SUCCESS, "Date blocked successfully!")
        self.state.form = BlockForm()
        self.reload()
        return True

    # ---------- Удаление ----------

    def delete_booking(self, booking_id, confirmed: bool = False) -> bool:
        """Без подтверждения запрос не отправляется."""
        if not confirmed:
            return False

        self.state.loading = True
        try:
            self.client.delete_booking(booking_id)
        except ApplicationError as exc:
            self.show_message(ERROR, exc.message or "Failed to delete booking")
            return False
        except TransportError:
            logger.exception("Error deleting booking %s", booking_id)
            self.show_message(ERROR, "Error deleting booking")
            return False
        finally:
            self.state.loading = False

        # локально ничего не удаляем, источник правды — следующая загрузка
        self.show_message(SUCCESS, "Booking deleted successfully!")
        self.reload()
        return True
