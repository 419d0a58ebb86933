# sales/tests/test_api.py

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase, override_settings
from rest_framework import status
from rest_framework.test import APIClient

from products.models import Product
from sales.models import Order

User = get_user_model()


@override_settings(POS_BUSINESS_TIME_ZONE="Asia/Manila", POS_CASH_METHODS=["cash"])
class OrderApiTests(TestCase):
    """
    GUARANTEES:
    - Checkout prices server-side and returns the persisted order
    - Domain errors map to stable codes and HTTP statuses
    - Orders are read-only over HTTP except for the status action
    """

    def setUp(self):
        self.user = User.objects.create_user(username="cashier", password="password123")
        self.client = APIClient()
        self.client.force_authenticate(user=self.user)

        self.latte = Product.objects.create(
            name="Latte",
            category="Coffee",
            base_price=Decimal("3.00"),
            hot_price=Decimal("3.50"),
            stock=4,
        )

    def _checkout(self, **overrides):
        payload = {
            "items": [
                {
                    "product_id": str(self.latte.pk),
                    "quantity": 2,
                    "temperature": "HOT",
                    "add_ons": [{"name": "Extra Shot", "price": "0.50"}],
                    "price": "3.50",
                }
            ],
            "payment_method": "cash",
            "service_type": "TAKE_OUT",
            "amount_received": "10.00",
            "customer": {"name": "Ana"},
        }
        payload.update(overrides)
        return self.client.post("/api/sales/orders/checkout/", payload, format="json")

    def test_requires_authentication(self):
        res = APIClient().get("/api/sales/orders/")
        self.assertEqual(res.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_checkout_creates_order(self):
        res = self._checkout()

        self.assertEqual(res.status_code, status.HTTP_201_CREATED, res.data)
        self.assertEqual(res.data["total"], "8.00")
        self.assertEqual(res.data["change"], "2.00")
        self.assertEqual(res.data["customer"]["name"], "Ana")
        self.assertEqual(res.data["created_by"], "cashier")
        self.assertFalse(res.data["has_price_mismatch"])
        self.assertIn("+08:00", res.data["timestamp_local"])

        item = res.data["items"][0]
        self.assertEqual(item["name"], "Latte")
        self.assertEqual(item["price"], "3.50")
        self.assertEqual(item["line_total"], "8.00")
        self.assertEqual(item["add_ons"][0]["name"], "Extra Shot")
        self.assertIsNone(item["discount"])

        self.latte.refresh_from_db()
        self.assertEqual(self.latte.stock, 2)

    def test_checkout_oversell_is_conflict(self):
        res = self._checkout(items=[{"product_id": str(self.latte.pk), "quantity": 5}])

        self.assertEqual(res.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(res.data["code"], "insufficient_stock")
        self.assertFalse(Order.objects.exists())

    def test_checkout_short_cash_is_bad_request(self):
        res = self._checkout(amount_received="1.00")

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["code"], "negative_change")

    def test_checkout_empty_cart_is_bad_request(self):
        res = self._checkout(items=[])
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_checkout_unknown_product_is_not_found(self):
        res = self._checkout(
            items=[{"product_id": "00000000-0000-0000-0000-000000000000", "quantity": 1}]
        )
        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(res.data["code"], "product_not_found")

    def test_list_and_retrieve(self):
        order_id = self._checkout().data["id"]

        listing = self.client.get("/api/sales/orders/")
        self.assertEqual(listing.status_code, status.HTTP_200_OK)
        self.assertEqual(listing.data["count"], 1)

        detail = self.client.get(f"/api/sales/orders/{order_id}/")
        self.assertEqual(detail.status_code, status.HTTP_200_OK)
        self.assertEqual(detail.data["id"], order_id)

    def test_orders_cannot_be_edited_or_deleted(self):
        order_id = self._checkout().data["id"]

        res = self.client.patch(f"/api/sales/orders/{order_id}/", {"total": "0"}, format="json")
        self.assertEqual(res.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)
        res = self.client.delete(f"/api/sales/orders/{order_id}/")
        self.assertEqual(res.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)

    def test_status_action(self):
        order_id = self._checkout(status="pending").data["id"]

        res = self.client.post(
            f"/api/sales/orders/{order_id}/status/", {"status": "completed"}, format="json"
        )
        self.assertEqual(res.status_code, status.HTTP_200_OK, res.data)
        self.assertEqual(res.data["status"], "completed")

        res = self.client.post(
            f"/api/sales/orders/{order_id}/status/", {"status": "pending"}, format="json"
        )
        self.assertEqual(res.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(res.data["code"], "invalid_order_transition")

    def test_reports(self):
        order = self._checkout().data

        daily = self.client.get("/api/sales/reports/daily/", {"date": order["business_date"]})
        self.assertEqual(daily.status_code, status.HTTP_200_OK)
        self.assertEqual(daily.data["transaction_count"], 1)
        self.assertEqual(daily.data["total_sales"], "8.00")

        for url in (
            "/api/sales/reports/range/",
            "/api/sales/reports/top-products/",
            "/api/sales/reports/categories/",
            "/api/sales/reports/product-sales/",
        ):
            self.assertEqual(self.client.get(url).status_code, status.HTTP_200_OK, url)

        bad = self.client.get("/api/sales/reports/daily/", {"date": "yesterday"})
        self.assertEqual(bad.status_code, status.HTTP_400_BAD_REQUEST)

    def test_range_report_rejects_overlong_range(self):
        res = self.client.get(
            "/api/sales/reports/range/", {"date_from": "2020-01-01", "date_to": "2026-01-01"}
        )

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["code"], "validation_error")

    def test_range_report_at_last_representable_day(self):
        res = self.client.get(
            "/api/sales/reports/range/", {"date_from": "9999-12-31", "date_to": "9999-12-31"}
        )

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(len(res.data["days"]), 1)

    def test_report_dates_must_exist(self):
        for url, params in (
            ("/api/sales/reports/daily/", {"date": "2024-02-30"}),
            ("/api/sales/reports/range/", {"date_to": "2024-13-01"}),
            ("/api/sales/reports/categories/", {"date_from": "soon"}),
        ):
            res = self.client.get(url, params)
            self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST, url)
