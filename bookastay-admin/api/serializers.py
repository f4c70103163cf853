import logging
from datetime import datetime, time, timezone as dt_timezone
from decimal import InvalidOperation

from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime
from rest_framework import serializers

from .records import AdminBlock, UserBooking, is_admin_block

logger = logging.getLogger(__name__)


class StayDateField(serializers.Field):
    """
    Дата заезда/выезда из ответа API.
    Бэкенд может отдавать как "2025-03-01", так и "2025-03-01T00:00:00.000Z",
    поэтому всегда приводим к aware datetime (наивные значения считаем UTC).
    """

    default_error_messages = {
        "invalid": "Expected an ISO date or datetime, got {value!r}.",
    }

    def to_internal_value(self, data):
        if not isinstance(data, str):
            self.fail("invalid", value=data)

        try:
            value = parse_datetime(data)
            if value is None:
                day = parse_date(data)
                value = datetime.combine(day, time.min) if day else None
        except ValueError:
            value = None

        if value is None:
            self.fail("invalid", value=data)

        if timezone.is_naive(value):
            value = timezone.make_aware(value, dt_timezone.utc)
        return value

    def to_representation(self, value):
        return value.isoformat()


class RecordIdField(serializers.Field):
    """id записи: число или строка, отдаём обратно как есть."""

    default_error_messages = {
        "invalid": "Record id must be an integer or a non-empty string.",
    }

    def to_internal_value(self, data):
        if isinstance(data, bool) or not isinstance(data, (int, str)):
            self.fail("invalid")
        if isinstance(data, str) and not data.strip():
            self.fail("invalid")
        return data

    def to_representation(self, value):
        return value


class LenientNumberMixin:
    """
    Число, которое бэкенд иногда присылает строкой ("45,000", "2 adults").
    Такое значение не отбрасывает запись, а сохраняется как есть.
    """

    def to_internal_value(self, data):
        try:
            return super().to_internal_value(data)
        except serializers.ValidationError:
            if not isinstance(data, (str, int, float)):
                raise
            logger.info("Keeping non-numeric %s value %r", self.field_name, data)
            return data

    def to_representation(self, value):
        try:
            return super().to_representation(value)
        except (ValueError, TypeError, InvalidOperation):
            return value


class LenientIntegerField(LenientNumberMixin, serializers.IntegerField):
    pass


class LenientDecimalField(LenientNumberMixin, serializers.DecimalField):
    pass


class BaseRecordSerializer(serializers.Serializer):
    id = RecordIdField()
    booking_type = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, default=""
    )
    room_type = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, default=""
    )
    check_in = StayDateField()
    check_out = StayDateField()

    record_class = None
    text_fields = ("booking_type", "room_type")

    def create(self, validated_data):
        # null из JSON превращаем в пустую строку, чтобы шаблоны не видели None
        for field_name in self.text_fields:
            if validated_data.get(field_name) is None:
                validated_data[field_name] = ""
        return self.record_class(**validated_data)


class AdminBlockSerializer(BaseRecordSerializer):
    notes = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, default=""
    )

    record_class = AdminBlock
    text_fields = ("booking_type", "room_type", "notes")


class UserBookingSerializer(BaseRecordSerializer):
    name = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, default=""
    )
    email = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, default=""
    )
    phone = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, default=""
    )
    guests = LenientIntegerField(required=False, allow_null=True, default=None)
    price = LenientDecimalField(
        max_digits=None,
        decimal_places=None,
        required=False,
        allow_null=True,
        default=None,
    )
    id_type = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, default=""
    )
    payment_status = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, default=""
    )

    record_class = UserBooking
    text_fields = (
        "booking_type",
        "room_type",
        "name",
        "email",
        "phone",
        "id_type",
        "payment_status",
    )


def serializer_class_for(booking_type):
    if is_admin_block(booking_type):
        return AdminBlockSerializer
    return UserBookingSerializer


def parse_records(items):
    """
    Превращает список словарей из `bookings.all` в AdminBlock / UserBooking.
    Тип выбирается только по booking_type == "admin".
    Некорректная запись -> serializers.ValidationError.
    """
    if not isinstance(items, list):
        raise serializers.ValidationError("bookings.all must be a list")

    records = []
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            raise serializers.ValidationError({index: "record must be an object"})

        serializer_class = serializer_class_for(item.get("booking_type"))
        serializer = serializer_class(data=item)
        if not serializer.is_valid():
            raise serializers.ValidationError({index: serializer.errors})
        records.append(serializer.save())

    return records


def dump_records(records):
    """Обратно в JSON-совместимые словари (для хранения в сессии)."""
    dumped = []
    for record in records:
        serializer_class = (
            AdminBlockSerializer if isinstance(record, AdminBlock) else UserBookingSerializer
        )
        dumped.append(dict(serializer_class(record).data))
    return dumped


class BlockDateRequestSerializer(serializers.Serializer):
    """
    Тело POST /admin/block-date.
    Проверяем только наличие дат, порядок заезда/выезда не проверяется.
    """

    room_type = serializers.CharField()
    check_in_date = serializers.CharField()
    check_out_date = serializers.CharField()
    reason = serializers.CharField(required=False, allow_blank=True, default="")
