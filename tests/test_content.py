from datetime import date


def test_public_inquiry_then_admin_workflow(client, admin_headers, fake_store):
    created = client.post("/admin-inquiries", json={
        "name": "Bob", "email": "bob@example.com", "message": "Do you clean carpets?",
    })
    assert created.status_code == 200
    inquiry = created.json()["data"]
    assert inquiry["status"] == "new"
    assert inquiry["priority"] == "medium"
    assert inquiry["inquiry_type"] == "general"

    resolved = client.put(
        f"/admin-inquiries/{inquiry['id']}",
        json={"status": "resolved", "admin_notes": "Called back"},
        headers=admin_headers,
    )
    assert resolved.status_code == 200
    assert resolved.json()["data"]["resolved_at"] is not None

    stats = client.get("/admin-inquiries/stats", headers=admin_headers).json()["data"]
    assert stats == {"total": 1, "new": 0, "in_progress": 0, "resolved": 1, "high_priority": 0}


def test_inquiry_requires_message(client):
    response = client.post("/admin-inquiries", json={"name": "Bob", "email": "bob@example.com"})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


def test_inquiry_list_filters(client, admin_headers, fake_store):
    fake_store.seed("contact_inquiries", name="A", status="new", priority="high")
    fake_store.seed("contact_inquiries", name="B", status="new", priority="low")
    fake_store.seed("contact_inquiries", name="C", status="resolved", priority="high")

    response = client.get(
        "/admin-inquiries", params={"status": "new", "priority": "high"}, headers=admin_headers
    )
    assert [r["name"] for r in response.json()["data"]] == ["A"]

    paged = client.get("/admin-inquiries", params={"limit": 2}, headers=admin_headers)
    assert len(paged.json()["data"]) == 2


def test_inquiry_list_is_admin_only(client):
    assert client.get("/admin-inquiries").status_code == 401


def test_update_unknown_inquiry(client, admin_headers):
    response = client.put("/admin-inquiries/404", json={"status": "resolved"}, headers=admin_headers)
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"


def test_booking_defaults(client, admin_headers):
    response = client.post("/bookings-api", json={
        "customer_name": "Carol", "email": "carol@example.com", "service_type": "Move-out clean",
    })
    assert response.status_code == 200
    booking = response.json()["data"]
    assert booking["status"] == "pending"
    assert booking["booking_date"] == date.today().isoformat()

    listed = client.get("/bookings-api", headers=admin_headers)
    assert [b["customer_name"] for b in listed.json()["data"]] == ["Carol"]


def test_booking_list_is_admin_only(client):
    assert client.get("/bookings-api").status_code == 401


def test_product_catalog_filters(client, fake_store):
    fake_store.seed("products", name="Oven Cleaner", category="Kitchen", price=12.5)
    fake_store.seed("products", name="Glass Spray", category="Kitchen", price=4.0)
    fake_store.seed("products", name="Tile Brush", category="Bathroom", price=8.0)

    everything = client.get("/products-api", params={"category": "All Products"}).json()["data"]
    assert len(everything) == 3

    kitchen = client.get("/products-api", params={"category": "Kitchen", "min_price": 5}).json()["data"]
    assert [p["name"] for p in kitchen] == ["Oven Cleaner"]

    search = client.get("/products-api", params={"search": "brush"}).json()["data"]
    assert [p["name"] for p in search] == ["Tile Brush"]

    by_price = client.get("/products-api", params={"sort_by": "price", "sort_order": "desc"}).json()["data"]
    assert [p["price"] for p in by_price] == [12.5, 8.0, 4.0]

    ranged = client.get("/products-api", params={"min_price": 5, "max_price": 10}).json()["data"]
    assert [p["name"] for p in ranged] == ["Tile Brush"]


def test_public_listings(client, fake_store):
    fake_store.seed("services", name="Deep Clean")
    fake_store.seed("banners", title="Spring", added_at="2024-03-01T00:00:00+00:00")
    fake_store.seed("banners", title="Summer", added_at="2024-06-01T00:00:00+00:00")
    for n in range(12):
        fake_store.seed("testimonials", name=f"T{n}", created_at=f"2024-01-{n + 1:02d}T00:00:00+00:00")

    assert client.get("/services-api").json()["data"][0]["name"] == "Deep Clean"
    assert [b["title"] for b in client.get("/banners-api").json()["data"]] == ["Summer", "Spring"]

    testimonials = client.get("/testimonials-api").json()["data"]
    assert len(testimonials) == 10
    assert testimonials[0]["name"] == "T11"


def test_admin_data_entities(client, admin_headers, fake_store):
    row = fake_store.seed("testimonials", name="Dana", rating=4)

    listed = client.get("/admin-data/testimonials", headers=admin_headers)
    assert listed.status_code == 200
    assert listed.json()["data"][0]["name"] == "Dana"

    updated = client.put(f"/admin-data/testimonials/{row['id']}", json={"rating": 5}, headers=admin_headers)
    assert updated.json()["data"]["rating"] == 5

    deleted = client.delete(f"/admin-data/testimonials/{row['id']}", headers=admin_headers)
    assert deleted.status_code == 200
    assert fake_store.rows("testimonials") == []


def test_admin_data_rejects_unknown_entity(client, admin_headers, fake_store):
    for method, path in (("get", "/admin-data/admin_users"), ("delete", "/admin-data/admin_users/1")):
        response = getattr(client, method)(path, headers=admin_headers)
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_ENTITY"
    assert len(fake_store.rows("admin_users")) == 1


def test_admin_data_requires_token(client):
    response = client.get("/admin-data/bookings")
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "TOKEN_REQUIRED"


def test_dashboard_overview_endpoint(client, admin_headers, fake_store):
    fake_store.seed("bookings", customer_name="Eve", service_type="Office", status="pending")
    fake_store.seed("contact_inquiries", name="Finn", inquiry_type="quote", status="new", priority="high")
    fake_store.failing.add("service_requests")

    response = client.get("/admin-data/dashboard-overview", headers=admin_headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["stats"]["totalBookings"] == 1
    assert data["stats"]["highPriorityInquiries"] == 1
    assert data["stats"]["totalServiceRequests"] == 0
    assert {a["type"] for a in data["recentActivity"]} == {"booking", "inquiry"}
