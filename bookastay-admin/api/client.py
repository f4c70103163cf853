import logging

import requests
from django.conf import settings
from rest_framework import serializers

from .serializers import BlockDateRequestSerializer, parse_records

logger = logging.getLogger(__name__)


class BookAStayAPIError(Exception):
    """Базовая ошибка обращения к API BookAStay."""

    def __init__(self, message=None):
        super().__init__(message or self.__class__.__name__)
        self.message = message


class TransportError(BookAStayAPIError):
    """Сеть недоступна, ответ не JSON или структура ответа не та."""


class ApplicationError(BookAStayAPIError):
    """Сервер ответил корректно, но с success=false."""


class InvalidRequestError(BookAStayAPIError):
    """Тело запроса не прошло проверку, запрос не отправлялся."""


class BookAStayClient:
    """
    Клиент админских эндпоинтов BookAStay:

    GET    /admin/bookings        -> { success, bookings: { all: [...] } }
    POST   /admin/block-date      -> { success, message? }
    DELETE /admin/bookings/<id>   -> { success, message? }

    Успех определяется только полем success в теле, код ответа не смотрим.
    """

    def __init__(self, base_url=None, timeout=None, session=None):
        self.base_url = (base_url or settings.BOOKASTAY_API_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.BOOKASTAY_API_TIMEOUT
        self.session = session or requests.Session()

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _request(self, method: str, path: str, **kwargs) -> dict:
        url = self._url(path)
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            logger.error("BookAStay %s %s failed: %s", method, url, exc)
            raise TransportError(str(exc)) from exc

        try:
            data = response.json()
        except ValueError as exc:
            logger.error(
                "BookAStay %s %s returned non-JSON body (status %s)",
                method,
                url,
                response.status_code,
            )
            raise TransportError("Response is not valid JSON") from exc

        if not isinstance(data, dict):
            raise TransportError("Response body must be a JSON object")

        if not data.get("success"):
            message = data.get("message") or None
            logger.warning(
                "BookAStay %s %s answered success=false: %s", method, url, message
            )
            raise ApplicationError(message)

        return data

    # ---------- Список ----------

    def list_bookings(self):
        """Все брони и блокировки (полная замена списка на клиенте)."""
        data = self._request("GET", "/admin/bookings")

        bookings = data.get("bookings")
        if not isinstance(bookings, dict):
            raise TransportError("Response has no 'bookings' object")

        try:
            return parse_records(bookings.get("all") or [])
        except serializers.ValidationError as exc:
            logger.error("BookAStay returned malformed bookings: %s", exc.detail)
            raise TransportError("Malformed bookings in response") from exc

    # ---------- Админские действия ----------

    def block_date(self, payload: dict):
        """
        Создать блокировку дат.
        payload: room_type, check_in_date, check_out_date, reason.
        Возвращает сообщение сервера (если есть).
        """
        serializer = BlockDateRequestSerializer(data=payload)
        if not serializer.is_valid():
            field_name, errors = next(iter(serializer.errors.items()))
            message = f"{field_name}: {errors[0]}"
            logger.warning("Rejected block-date payload: %s", message)
            raise InvalidRequestError(message)

        data = self._request("POST", "/admin/block-date", json=serializer.validated_data)
        logger.info(
            "Blocked %s from %s to %s",
            serializer.validated_data["room_type"],
            serializer.validated_data["check_in_date"],
            serializer.validated_data["check_out_date"],
        )
        return data.get("message")

    def delete_booking(self, booking_id):
        """Удалить бронь или блокировку по id. Безвозвратно."""
        data = self._request("DELETE", f"/admin/bookings/{booking_id}")
        logger.info("Deleted booking %s", booking_id)
        return data.get("message")
