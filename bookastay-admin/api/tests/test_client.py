from unittest.mock import MagicMock

import requests
from django.test import SimpleTestCase, override_settings

from api.client import (
    ApplicationError,
    BookAStayClient,
    InvalidRequestError,
    TransportError,
)
from api.records import AdminBlock, UserBooking


def json_response(payload, status_code=200):
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = payload
    return response


@override_settings(BOOKASTAY_API_URL="https://api.example.com/api/", BOOKASTAY_API_TIMEOUT=3)
class BookAStayClientTests(SimpleTestCase):
    def setUp(self):
        self.session = MagicMock()
        self.client_api = BookAStayClient(session=self.session)

    # ---------- list ----------

    def test_list_bookings(self):
        self.session.request.return_value = json_response(
            {
                "success": True,
                "bookings": {
                    "all": [
                        {
                            "id": 1,
                            "booking_type": "admin",
                            "room_type": "entire",
                            "check_in": "2025-03-01",
                            "check_out": "2025-03-04",
                        },
                        {
                            "id": 2,
                            "booking_type": "user",
                            "room_type": "room1",
                            "check_in": "2025-03-05",
                            "check_out": "2025-03-06",
                            "name": "Ada",
                        },
                    ]
                },
            }
        )

        records = self.client_api.list_bookings()

        self.session.request.assert_called_once_with(
            "GET", "https://api.example.com/api/admin/bookings", timeout=3
        )
        self.assertIsInstance(records[0], AdminBlock)
        self.assertIsInstance(records[1], UserBooking)

    def test_list_without_all_is_empty(self):
        self.session.request.return_value = json_response({"success": True, "bookings": {}})
        self.assertEqual(self.client_api.list_bookings(), [])

    def test_list_without_bookings_object_is_transport_error(self):
        self.session.request.return_value = json_response({"success": True})
        with self.assertRaises(TransportError):
            self.client_api.list_bookings()

    def test_list_with_bad_record_is_transport_error(self):
        self.session.request.return_value = json_response(
            {"success": True, "bookings": {"all": [{"id": 1, "check_in": "nope"}]}}
        )
        with self.assertRaises(TransportError):
            self.client_api.list_bookings()

    def test_list_keeps_good_record_next_to_odd_one(self):
        self.session.request.return_value = json_response(
            {
                "success": True,
                "bookings": {
                    "all": [
                        {
                            "id": 1,
                            "booking_type": "admin",
                            "room_type": "entire",
                            "check_in": "2025-03-01",
                            "check_out": "2025-03-04",
                        },
                        {
                            "id": 2,
                            "booking_type": "user",
                            "room_type": "room1",
                            "check_in": "2025-03-05",
                            "check_out": "2025-03-06",
                            "guests": "2 adults",
                            "price": "45,000",
                        },
                    ]
                },
            }
        )

        block, booking = self.client_api.list_bookings()

        self.assertEqual(block.id, 1)
        self.assertEqual(booking.id, 2)
        self.assertEqual(booking.price, "45,000")

    def test_success_false_is_application_error(self):
        self.session.request.return_value = json_response({"success": False})
        with self.assertRaises(ApplicationError) as ctx:
            self.client_api.list_bookings()
        self.assertIsNone(ctx.exception.message)

    def test_network_failure_is_transport_error(self):
        self.session.request.side_effect = requests.ConnectionError("unreachable")
        with self.assertRaises(TransportError):
            self.client_api.list_bookings()

    def test_non_json_body_is_transport_error(self):
        response = MagicMock(status_code=502)
        response.json.side_effect = ValueError("no json")
        self.session.request.return_value = response
        with self.assertRaises(TransportError):
            self.client_api.list_bookings()

    def test_status_code_is_ignored_when_body_says_success(self):
        self.session.request.return_value = json_response(
            {"success": True, "bookings": {"all": []}}, status_code=500
        )
        self.assertEqual(self.client_api.list_bookings(), [])

    # ---------- block ----------

    def test_block_date_posts_the_four_fields(self):
        self.session.request.return_value = json_response(
            {"success": True, "message": "Blocked"}
        )

        message = self.client_api.block_date(
            {
                "room_type": "room2",
                "check_in_date": "2025-03-01",
                "check_out_date": "2025-03-03",
                "reason": "Cleaning",
            }
        )

        self.assertEqual(message, "Blocked")
        method, url = self.session.request.call_args.args
        self.assertEqual((method, url), ("POST", "https://api.example.com/api/admin/block-date"))
        self.assertEqual(
            dict(self.session.request.call_args.kwargs["json"]),
            {
                "room_type": "room2",
                "check_in_date": "2025-03-01",
                "check_out_date": "2025-03-03",
                "reason": "Cleaning",
            },
        )

    def test_block_date_failure_carries_server_message(self):
        self.session.request.return_value = json_response(
            {"success": False, "message": "Dates overlap an existing booking"}, status_code=409
        )
        with self.assertRaises(ApplicationError) as ctx:
            self.client_api.block_date(
                {
                    "room_type": "entire",
                    "check_in_date": "2025-03-01",
                    "check_out_date": "2025-03-03",
                    "reason": "",
                }
            )
        self.assertEqual(ctx.exception.message, "Dates overlap an existing booking")

    def test_block_date_with_blank_room_type_is_not_sent(self):
        with self.assertRaises(InvalidRequestError) as ctx:
            self.client_api.block_date(
                {
                    "room_type": "  ",
                    "check_in_date": "2025-03-01",
                    "check_out_date": "2025-03-03",
                }
            )

        self.assertEqual(ctx.exception.message, "room_type: This field may not be blank.")
        self.session.request.assert_not_called()

    # ---------- delete ----------

    def test_delete_booking(self):
        self.session.request.return_value = json_response({"success": True})

        self.client_api.delete_booking(42)

        self.session.request.assert_called_once_with(
            "DELETE", "https://api.example.com/api/admin/bookings/42", timeout=3
        )

    def test_delete_failure(self):
        self.session.request.return_value = json_response(
            {"success": False, "message": "Booking not found"}, status_code=404
        )
        with self.assertRaises(ApplicationError) as ctx:
            self.client_api.delete_booking("abc")
        self.assertEqual(ctx.exception.message, "Booking not found")
