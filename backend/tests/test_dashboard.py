"""
Tests for the dashboard aggregates
"""
from datetime import date

import pytest

from app.services.dashboard_service import DashboardService, period_start, month_bounds


def post(client, path, headers, body):
    response = client.post(path, json=body, headers=headers)
    assert response.status_code in (200, 201), response.text
    return response.json()


@pytest.fixture
def books(client, company_a, make_customer, make_supplier, make_product, make_warehouse, make_employee, make_account):
    """A small company: two customers, paid and open invoices, a received PO, stock and ledger entries"""
    headers = company_a["headers"]
    reliance = make_customer(headers, name="Reliance Retail")
    tata = make_customer(headers, name="Tata Motors")
    supplier = make_supplier(headers)
    bolt = make_product(headers, name="Steel Bolt", sku="BOLT")
    wire = make_product(headers, name="Copper Wire", sku="WIRE")
    warehouse = make_warehouse(headers, name="Pune")
    make_employee(headers)
    cash = make_account(headers, code="1000", name="Cash", type="ASSET")

    def invoice(customer, product, quantity, on, paid=True, due=None):
        created = post(client, "/api/invoices", headers, {
            "customerId": customer["id"],
            "date": on,
            "dueDate": due,
            "items": [{"productId": product["id"], "quantity": quantity, "unitPrice": 100}],
        })
        if paid:
            post(client, f"/api/invoices/{created['id']}/mark-paid", headers, None)
        return created

    invoice(reliance, bolt, 3, "2025-03-10")
    invoice(tata, wire, 5, "2025-03-12")
    invoice(reliance, bolt, 1, "2025-02-01")
    invoice(tata, bolt, 1, "2025-03-20", paid=False, due="2025-04-19")

    po = post(client, "/api/purchase-orders", headers, {
        "supplierId": supplier["id"],
        "date": "2025-03-05",
        "items": [{"productId": bolt["id"], "quantity": 10, "unitPrice": 25}],
    })
    post(client, f"/api/purchase-orders/{po['id']}/confirm", headers, None)
    post(client, f"/api/purchase-orders/{po['id']}/receive", headers, None)

    post(client, "/api/inventory/stock", headers,
         {"productId": bolt["id"], "warehouseId": warehouse["id"], "quantity": 50, "reserved": 5})
    post(client, "/api/inventory/stock", headers,
         {"productId": wire["id"], "warehouseId": warehouse["id"], "quantity": 4, "reserved": 1})

    for kind, amount in (("DEBIT", 500), ("CREDIT", 200)):
        post(client, "/api/transactions", headers, {
            "date": "2025-03-15", "description": f"{kind} entry", "amount": amount,
            "type": kind, "accountId": cash["id"],
        })

    return {
        "company_id": company_a["user"]["companyId"],
        "headers": headers,
        "reliance": reliance,
        "tata": tata,
        "bolt": bolt,
        "wire": wire,
    }


class TestPeriods:
    @pytest.mark.parametrize("period,expected", [
        ("week", date(2025, 5, 8)),
        ("month", date(2025, 5, 1)),
        ("quarter", date(2025, 4, 1)),
        ("year", date(2025, 1, 1)),
    ])
    def test_period_start(self, period, expected):
        assert period_start(period, date(2025, 5, 15)) == expected

    def test_month_bounds_december(self):
        assert month_bounds(date(2024, 12, 9)) == (date(2024, 12, 1), date(2024, 12, 31))


class TestOverview:
    def test_counts_and_lists(self, client, books):
        response = client.get("/api/dashboard/overview", headers=books["headers"])
        assert response.status_code == 200
        body = response.json()
        assert body["counts"] == {
            "customers": 2, "suppliers": 1, "products": 2,
            "employees": 1, "invoices": 4, "purchaseOrders": 1,
        }
        assert [item["product"]["sku"] for item in body["lowStockProducts"]] == ["WIRE"]
        assert body["lowStockProducts"][0]["available"] == 3
        assert len(body["recentTransactions"]) == 2
        assert [inv["status"] for inv in body["pendingInvoices"]] == ["SENT"]

    def test_low_stock_lists_each_product_once(self, client, auth_headers, make_product, make_warehouse):
        north = make_warehouse(auth_headers, name="North")
        south = make_warehouse(auth_headers, name="South")
        products = [make_product(auth_headers) for _ in range(6)]

        def stock(product, warehouse, quantity):
            post(client, "/api/inventory/stock", auth_headers,
                 {"productId": product["id"], "warehouseId": warehouse["id"], "quantity": quantity})

        stock(products[0], north, 1)
        stock(products[0], south, 2)
        for quantity, product in enumerate(products[1:], start=3):
            stock(product, north, quantity)

        low = client.get("/api/dashboard/overview", headers=auth_headers).json()["lowStockProducts"]
        assert [item["product"]["id"] for item in low] == [p["id"] for p in products[:5]]
        assert low[0]["available"] == 1
        assert [row["warehouse"]["name"] for row in low[0]["stocks"]] == ["North", "South"]

        inventory = client.get("/api/dashboard/inventory", headers=auth_headers).json()
        assert len(inventory["lowStock"]) == 6

    def test_monthly_figures_use_injected_day(self, db_session, books):
        overview = DashboardService(db_session).get_overview(books["company_id"], today=date(2025, 3, 31))
        assert overview["monthly_revenue"] == 800
        assert overview["monthly_expenses"] == 250

    def test_other_company_sees_nothing(self, client, books, company_b):
        body = client.get("/api/dashboard/overview", headers=company_b["headers"]).json()
        assert body["counts"]["invoices"] == 0
        assert body["lowStockProducts"] == []
        assert body["monthlyRevenue"] == 0


class TestSales:
    def test_month_period(self, db_session, books):
        sales = DashboardService(db_session).get_sales(books["company_id"], "month", today=date(2025, 3, 31))
        assert sales["start_date"] == date(2025, 3, 1)
        assert sales["invoice_count"] == 2
        assert sales["total_sales"] == 800
        top = sales["top_customers"]
        assert [entry["customer"].name for entry in top] == ["Tata Motors", "Reliance Retail"]
        assert top[0]["total"] == 500

    def test_quarter_period(self, db_session, books):
        sales = DashboardService(db_session).get_sales(books["company_id"], "quarter", today=date(2025, 3, 31))
        assert sales["invoice_count"] == 3
        totals = {entry["customer"].name: entry for entry in sales["top_customers"]}
        assert totals["Reliance Retail"]["total"] == 400
        assert totals["Reliance Retail"]["invoice_count"] == 2

    def test_invalid_period(self, client, books):
        response = client.get("/api/dashboard/sales", params={"period": "decade"}, headers=books["headers"])
        assert response.status_code == 400

    def test_endpoint_shape(self, client, books):
        body = client.get("/api/dashboard/sales", params={"period": "year"}, headers=books["headers"]).json()
        assert body["period"] == "year"
        assert set(body) >= {"startDate", "endDate", "totalSales", "invoiceCount", "invoices", "topCustomers"}


class TestInventory:
    def test_totals_low_stock_and_top_products(self, client, books):
        body = client.get("/api/dashboard/inventory", headers=books["headers"]).json()
        assert body["warehouses"] == [{
            "warehouse": {"id": body["warehouses"][0]["warehouse"]["id"], "name": "Pune"},
            "quantity": 54, "reserved": 6, "available": 48,
        }]
        assert [item["product"]["sku"] for item in body["lowStock"]] == ["WIRE"]
        assert [(p["product"]["sku"], p["quantity"]) for p in body["topProducts"]] == [("WIRE", 5), ("BOLT", 4)]
        assert body["topProducts"][0]["revenue"] == 500


class TestFinancial:
    def test_monthly_and_balances(self, db_session, books):
        financial = DashboardService(db_session).get_financial(books["company_id"], today=date(2025, 3, 31))
        assert financial["year"] == 2025
        assert [m["month"] for m in financial["monthly"]] == [1, 2, 3]
        assert financial["monthly"][1]["revenue"] == 100
        assert financial["monthly"][2]["revenue"] == 800
        assert financial["monthly"][2]["expenses"] == 250

        balances = financial["account_balances"]
        assert len(balances) == 1
        assert balances[0]["account"].code == "1000"
        assert balances[0]["balance"] == 300

    def test_endpoint(self, client, books):
        response = client.get("/api/dashboard/financial", headers=books["headers"])
        assert response.status_code == 200
        assert response.json()["accountBalances"][0]["balance"] == 300
