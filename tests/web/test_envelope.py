"""Tests for the response envelope."""

from storefront.web.envelope import ApiResponse, failure, ok, paginated


def test_ok_wraps_data():
    response = ok({"id": 1}, "Created")

    assert isinstance(response, ApiResponse)
    assert response.success is True
    assert response.message == "Created"
    assert response.data == {"id": 1}
    assert response.errors == []
    assert response.timestamp.tzinfo is not None


def test_failure_defaults_errors_to_message():
    body = failure("Cart is empty")

    assert body["success"] is False
    assert body["message"] == "Cart is empty"
    assert body["errors"] == ["Cart is empty"]
    assert body["data"] is None
    assert isinstance(body["timestamp"], str)


def test_failure_keeps_explicit_errors():
    assert failure("Validation failed", ["a", "b"])["errors"] == ["a", "b"]


class TestPaginated:
    def test_middle_page(self):
        page = paginated(["x"] * 10, total_count=35, page=2, page_size=10)

        assert page.total_pages == 4
        assert page.has_next_page is True
        assert page.has_previous_page is True

    def test_last_page(self):
        page = paginated(["x"] * 5, total_count=35, page=4, page_size=10)

        assert page.has_next_page is False
        assert page.has_previous_page is True

    def test_no_results(self):
        page = paginated([], total_count=0, page=1, page_size=10)

        assert page.total_pages == 0
        assert page.has_next_page is False
        assert page.has_previous_page is False
