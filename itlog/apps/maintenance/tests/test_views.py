"""Tests for the maintenance log page."""

from unittest import mock

from django.test import SimpleTestCase, tag
from django.urls import reverse

from itlog.apps.core.media import MAX_PHOTO_FILE_SIZE_BYTES, image_data_uri
from itlog.apps.core.test_utils import (
    MINIMAL_PNG,
    LocalBackendMixin,
    SuppressRequestLogsMixin,
    create_uploaded_image,
    valid_form_data,
)
from itlog.apps.maintenance.controller import FAILURE_NOTICE
from itlog.apps.maintenance.errors import FetchError, InsertError, UploadError


@tag("views")
class LogHomeGetTests(LocalBackendMixin, SimpleTestCase):
    def setUp(self):
        super().setUp()
        self.url = reverse("maintenance:log-home")

    def test_empty_state(self):
        response = self.client.get(self.url)

        self.assertEqual(response.status_code, 200)
        self.assertTemplateUsed(response, "maintenance/log_home.html")
        self.assertContains(response, "No maintenance logs found.")
        self.assertContains(response, "Save Log Entry")

    def test_lists_entries_most_recent_first(self):
        self.seed(computer_model="ThinkPad T14", log_date="2024-01-01T09:00:00+00:00")
        self.seed(computer_model="MacBook Air", log_date="2024-02-01T09:00:00+00:00")

        response = self.client.get(self.url)

        content = response.content.decode()
        self.assertNotIn("No maintenance logs found.", content)
        self.assertLess(content.index("MacBook Air"), content.index("ThinkPad T14"))

    def test_entry_summary_and_details(self):
        self.seed(
            serial_number="SN-77",
            ip_address="10.0.0.9",
            owner="Legal",
            reported_issue="Fan noise",
            image_url="https://cdn.example/fan.jpg",
        )

        response = self.client.get(self.url)

        self.assertContains(response, "S/N: SN-77")
        self.assertContains(response, "IP: 10.0.0.9")
        self.assertContains(response, "<strong>Legal</strong>", html=False)
        self.assertContains(response, "View Details")
        self.assertContains(response, "Fan noise")
        self.assertContains(response, 'alt="Issue with Dell Latitude 7420"')
        self.assertContains(response, "https://cdn.example/fan.jpg")

    def test_entry_without_ip_or_photo(self):
        self.seed()

        response = self.client.get(self.url)

        self.assertNotContains(response, "IP:")
        self.assertNotContains(response, 'alt="Issue with')

    def test_status_buckets(self):
        for status in ("Reported", "In Progress", "Pending Parts", "Resolved", "Closed"):
            self.seed(status=status)

        response = self.client.get(self.url)

        self.assertContains(response, "pill--reported", count=1)
        self.assertContains(response, "pill--in-progress", count=1)
        self.assertContains(response, "pill--pending", count=1)
        self.assertContains(response, "pill--done", count=2)

    def test_load_failure_shows_notice_and_empty_list(self):
        with mock.patch.object(self.backend, "select", side_effect=FetchError("timeout")):
            response = self.client.get(self.url)

        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "Could not load maintenance logs.")

    def test_one_photo_input_with_camera_and_library_buttons(self):
        response = self.client.get(self.url)

        self.assertContains(response, 'type="file"', count=1)
        self.assertContains(response, 'name="photo"', count=1)
        self.assertContains(response, 'data-photo-source="camera"', count=1)
        self.assertContains(response, 'data-photo-source="library"', count=1)


@tag("views")
class LogHomePostTests(SuppressRequestLogsMixin, LocalBackendMixin, SimpleTestCase):
    def setUp(self):
        super().setUp()
        self.url = reverse("maintenance:log-home")

    def rows(self):
        return self.backend.select(self.table, order_by="log_date")

    def test_create_without_photo(self):
        response = self.client.post(self.url, valid_form_data(), follow=True)

        self.assertRedirects(response, self.url)
        rows = self.rows()
        self.assertEqual(len(rows), 1)
        self.assertEqual(rows[0]["computer_model"], "Dell Latitude 7420")
        self.assertIsNone(rows[0]["image_url"])
        self.assertIsNone(rows[0]["ip_address"])
        self.assertContains(response, "Log entry saved.")

    def test_reloading_after_success_does_not_duplicate(self):
        """Success redirects, so a browser reload repeats the GET, not the POST."""
        response = self.client.post(self.url, valid_form_data(), follow=True)
        self.assertEqual(response.request["REQUEST_METHOD"], "GET")

        self.client.get(response.request["PATH_INFO"])

        self.assertEqual(len(self.rows()), 1)

    def test_resolved_laptop_shows_in_done_bucket(self):
        response = self.client.post(self.url, valid_form_data(status="Resolved"), follow=True)

        self.assertContains(response, "Dell Latitude 7420")
        self.assertContains(response, "pill--done", count=1)
        self.assertNotContains(response, "No maintenance logs found.")

    def test_form_is_cleared_after_success(self):
        response = self.client.post(
            self.url, valid_form_data(owner="Accounts Payable"), follow=True
        )

        form = response.context["form"]
        self.assertFalse(form.is_bound)
        self.assertIsNone(response.context["preview"])
        self.assertNotContains(response, 'value="Accounts Payable"')

    def test_success_rereads_list_before_redirecting(self):
        with mock.patch.object(self.backend, "select", wraps=self.backend.select) as select:
            response = self.client.post(self.url, valid_form_data())

        self.assertEqual(response.status_code, 302)
        select.assert_called_once()

    def test_create_with_photo(self):
        data = valid_form_data()
        data["photo"] = create_uploaded_image(name="screen.jpg")

        with mock.patch(
            "itlog.apps.maintenance.gateway.time.time_ns", return_value=1_700_000_000_000_000_000
        ):
            response = self.client.post(self.url, data, follow=True)

        self.assertEqual(response.status_code, 200)
        row = self.rows()[0]
        self.assertEqual(row["image_url"], f"/media/{self.bucket}/1700000000000.jpg")
        self.assertIsNotNone(self.backend.get_object(self.bucket, "1700000000000.jpg"))
        self.assertContains(response, 'alt="Issue with Dell Latitude 7420"')

    def test_ip_address_is_saved(self):
        self.client.post(self.url, valid_form_data(ip_address=" 192.168.1.20 "))
        self.assertEqual(self.rows()[0]["ip_address"], "192.168.1.20")

    def test_invalid_form_saves_nothing(self):
        with mock.patch.object(self.backend, "insert") as insert:
            response = self.client.post(self.url, valid_form_data(serial_number=""))

        self.assertEqual(response.status_code, 200)
        insert.assert_not_called()
        self.assertContains(response, "This field is required.")
        self.assertContains(response, 'value="Dell Latitude 7420"')

    def test_insert_failure_keeps_draft_and_shows_notice(self):
        data = valid_form_data(owner="Finance Dept")
        data["photo"] = create_uploaded_image(name="screen.jpg")

        with mock.patch.object(self.backend, "insert", side_effect=InsertError("rejected")):
            response = self.client.post(self.url, data)

        self.assertEqual(response.status_code, 502)
        self.assertContains(response, FAILURE_NOTICE, status_code=502)
        self.assertContains(response, 'value="Finance Dept"', status_code=502)
        self.assertContains(
            response, 'name="image_preview" value="data:image/jpeg;base64,', status_code=502
        )
        self.assertContains(response, 'name="image_name" value="screen.jpg"', status_code=502)
        self.assertEqual(self.rows(), [])

    def test_upload_failure_inserts_nothing(self):
        data = valid_form_data()
        data["photo"] = create_uploaded_image()

        with mock.patch.object(self.backend, "upload", side_effect=UploadError("bucket missing")):
            response = self.client.post(self.url, data)

        self.assertEqual(response.status_code, 502)
        self.assertEqual(self.rows(), [])

    def test_retry_with_restored_preview_saves_photo(self):
        data = valid_form_data(
            image_preview=image_data_uri(MINIMAL_PNG, "image/png"), image_name="screen.png"
        )

        response = self.client.post(self.url, data)

        self.assertEqual(response.status_code, 302)
        row = self.rows()[0]
        self.assertTrue(row["image_url"].endswith(".png"))

    def test_retry_with_photo_near_size_limit(self):
        """The kept preview of a photo just under the limit still fits in the retry POST."""
        # Pillow stops reading a PNG at IEND, so padding keeps it a valid image
        content = MINIMAL_PNG + b"\0" * (MAX_PHOTO_FILE_SIZE_BYTES - len(MINIMAL_PNG) - 1024)
        data = valid_form_data(
            image_preview=image_data_uri(content, "image/png"), image_name="board.png"
        )

        response = self.client.post(self.url, data)

        self.assertEqual(response.status_code, 302)
        row = self.rows()[0]
        self.assertTrue(row["image_url"].endswith(".png"))

    def test_clear_image_saves_without_photo(self):
        data = valid_form_data(
            image_preview=image_data_uri(MINIMAL_PNG, "image/png"),
            image_name="screen.png",
            clear_image="on",
        )

        with mock.patch.object(self.backend, "upload") as upload:
            self.client.post(self.url, data)

        upload.assert_not_called()
        self.assertIsNone(self.rows()[0]["image_url"])
