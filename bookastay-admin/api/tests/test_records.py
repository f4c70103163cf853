from datetime import datetime, timezone

from django.test import SimpleTestCase

from api.records import AdminBlock, UserBooking, nights, partition


def day(value: str) -> datetime:
    return datetime.fromisoformat(value).replace(tzinfo=timezone.utc)


class NightsTests(SimpleTestCase):
    def test_three_nights(self):
        self.assertEqual(nights(day("2025-03-01"), day("2025-03-04")), 3)

    def test_same_day_is_zero(self):
        self.assertEqual(nights(day("2025-03-01"), day("2025-03-01")), 0)

    def test_checkout_before_checkin_stays_negative(self):
        self.assertEqual(nights(day("2025-03-04"), day("2025-03-01")), -3)

    def test_partial_day_rounds_up(self):
        self.assertEqual(
            nights(day("2025-03-01T00:00:00"), day("2025-03-02T06:00:00")),
            2,
        )


class PartitionTests(SimpleTestCase):
    def setUp(self):
        self.block_1 = AdminBlock(
            id=1, room_type="entire", check_in=day("2025-03-01"), check_out=day("2025-03-02")
        )
        self.booking_1 = UserBooking(
            id=2,
            room_type="room1",
            check_in=day("2025-03-05"),
            check_out=day("2025-03-07"),
            booking_type="user",
            name="Ada",
        )
        self.block_2 = AdminBlock(
            id=3, room_type="room2", check_in=day("2025-04-01"), check_out=day("2025-04-03")
        )
        self.booking_2 = UserBooking(
            id=4, room_type="entire", check_in=day("2025-05-01"), check_out=day("2025-05-02")
        )

    def test_split_is_total_disjoint_and_ordered(self):
        records = [self.block_1, self.booking_1, self.block_2, self.booking_2]

        admin_blocks, user_bookings = partition(records)

        self.assertEqual(admin_blocks, [self.block_1, self.block_2])
        self.assertEqual(user_bookings, [self.booking_1, self.booking_2])
        self.assertEqual(len(admin_blocks) + len(user_bookings), len(records))

    def test_empty(self):
        self.assertEqual(partition([]), ([], []))

    def test_nights_property(self):
        self.assertEqual(self.booking_1.nights, 2)
        self.assertEqual(self.block_2.nights, 2)

    def test_paid_flag(self):
        self.assertFalse(self.booking_1.is_paid)
        self.booking_1.payment_status = "paid"
        self.assertTrue(self.booking_1.is_paid)
