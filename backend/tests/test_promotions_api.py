from datetime import timedelta


def promotion_payload(now, **kwargs):
    data = {
        "title": "Summer sale",
        "promotion_type": "percentage",
        "discount_value": "20",
        "applicable_to": "category",
        "applicable_ids": [1, 2],
        "start_date": (now - timedelta(hours=1)).isoformat(),
        "end_date": (now + timedelta(days=3)).isoformat(),
    }
    data.update(kwargs)
    return data


def test_active_promotions(client, catalog):
    response = client.get("/api/promotions/active")
    assert response.status_code == 200
    data = {p["title"]: p for p in response.json()}

    assert set(data) == {"Sitewide 10%", "Phones -150"}

    sitewide = data["Sitewide 10%"]
    assert sitewide["badge_text"] == "-10%"
    assert sitewide["is_ending_soon"] is False
    assert sitewide["is_new"] is False
    assert sitewide["time_remaining"]["is_expired"] is False
    assert sitewide["time_remaining"]["days"] in (4, 5)

    phones = data["Phones -150"]
    assert phones["badge_text"] == "-₱150"
    assert phones["is_ending_soon"] is True
    assert phones["is_new"] is True


def test_featured_promotions(client, catalog):
    response = client.get("/api/promotions/featured")
    assert [p["title"] for p in response.json()] == ["Phones -150"]


def test_admin_endpoints_require_auth(client, catalog, customer_headers):
    assert client.get("/api/promotions/").status_code == 401
    assert client.get("/api/promotions/", headers=customer_headers).status_code == 403


def test_admin_lists_all_promotions(client, catalog, admin_headers):
    response = client.get("/api/promotions/", headers=admin_headers)
    assert response.status_code == 200
    assert len(response.json()) == 3


def test_create_promotion(client, admin_headers, now):
    response = client.post("/api/promotions/", json=promotion_payload(now, code="SUMMER"), headers=admin_headers)
    assert response.status_code == 201
    data = response.json()

    assert data["applicable_ids"] == ["1", "2"]
    assert data["usage_count"] == 0
    assert data["is_active"] is True

    fetched = client.get(f"/api/promotions/{data['id']}", headers=admin_headers)
    assert fetched.json()["code"] == "SUMMER"


def test_create_promotion_duplicate_code(client, admin_headers, now):
    client.post("/api/promotions/", json=promotion_payload(now, code="DUP"), headers=admin_headers)
    response = client.post("/api/promotions/", json=promotion_payload(now, code="DUP"), headers=admin_headers)
    assert response.status_code == 400


def test_create_promotion_validation(client, admin_headers, now):
    backwards = promotion_payload(
        now,
        start_date=(now + timedelta(days=2)).isoformat(),
        end_date=now.isoformat(),
    )
    assert client.post("/api/promotions/", json=backwards, headers=admin_headers).status_code == 422

    too_much = promotion_payload(now, discount_value="150")
    assert client.post("/api/promotions/", json=too_much, headers=admin_headers).status_code == 422

    negative = promotion_payload(now, promotion_type="fixed_amount", discount_value="-5")
    assert client.post("/api/promotions/", json=negative, headers=admin_headers).status_code == 422


def test_created_promotion_changes_prices(client, catalog, admin_headers, now):
    payload = promotion_payload(
        now,
        promotion_type="fixed_amount",
        discount_value="40",
        applicable_to="product",
        applicable_ids=[catalog["cable"].id],
    )
    assert client.post("/api/promotions/", json=payload, headers=admin_headers).status_code == 201

    data = client.get("/api/products/usb-cable").json()
    assert float(data["final_price"]) == 10.0
    assert data["promotion"]["title"] == "Summer sale"


def test_update_promotion(client, catalog, admin_headers):
    promo_id = catalog["sitewide"].id
    response = client.patch(
        f"/api/promotions/{promo_id}",
        json={"discount_value": "25", "is_featured": True},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert float(response.json()["discount_value"]) == 25.0
    assert response.json()["is_featured"] is True

    data = client.get("/api/products/usb-cable").json()
    assert float(data["final_price"]) == 37.5


def test_pausing_promotion_removes_it(client, catalog, admin_headers):
    promo_id = catalog["phones_sale"].id
    client.patch(f"/api/promotions/{promo_id}", json={"is_active": False}, headers=admin_headers)

    data = client.get("/api/products/phone-x").json()
    assert float(data["final_price"]) == 900.0
    assert data["promotion"]["id"] == catalog["sitewide"].id


def test_update_promotion_rejects_bad_window(client, catalog, admin_headers, now):
    promo_id = catalog["sitewide"].id
    response = client.patch(
        f"/api/promotions/{promo_id}",
        json={"end_date": (now - timedelta(days=30)).isoformat()},
        headers=admin_headers,
    )
    assert response.status_code == 400


def test_update_promotion_rejects_null(client, catalog, admin_headers):
    promo_id = catalog["sitewide"].id
    response = client.patch(f"/api/promotions/{promo_id}", json={"title": None}, headers=admin_headers)
    assert response.status_code == 422


def test_delete_promotion(client, catalog, admin_headers):
    promo_id = catalog["expired"].id
    assert client.delete(f"/api/promotions/{promo_id}", headers=admin_headers).status_code == 200
    assert client.get(f"/api/promotions/{promo_id}", headers=admin_headers).status_code == 404
    assert client.delete(f"/api/promotions/{promo_id}", headers=admin_headers).status_code == 404


def test_update_rejects_percentage_above_100(client, catalog, admin_headers):
    promo_id = catalog["sitewide"].id
    response = client.patch(f"/api/promotions/{promo_id}", json={"discount_value": "150"}, headers=admin_headers)
    assert response.status_code == 400

    data = client.get("/api/products/usb-cable").json()
    assert float(data["final_price"]) == 45.0


def test_update_rejects_switch_to_percentage_above_100(client, catalog, admin_headers):
    promo_id = catalog["phones_sale"].id
    response = client.patch(
        f"/api/promotions/{promo_id}",
        json={"promotion_type": "percentage"},
        headers=admin_headers,
    )
    assert response.status_code == 400

    data = client.get("/api/products/phone-x").json()
    assert float(data["final_price"]) == 850.0
    assert data["promotion"]["badge_text"] == "-₱150"


def test_update_allows_switch_with_valid_percentage(client, catalog, admin_headers):
    promo_id = catalog["phones_sale"].id
    response = client.patch(
        f"/api/promotions/{promo_id}",
        json={"promotion_type": "percentage", "discount_value": "30"},
        headers=admin_headers,
    )
    assert response.status_code == 200

    data = client.get("/api/products/phone-x").json()
    assert float(data["final_price"]) == 700.0
