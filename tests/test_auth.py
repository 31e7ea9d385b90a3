from conftest import auth_headers
from core.messages import get_message
from services.auth import decode_access_token


def test_vendor_self_registration_and_login(client):
    response = client.post("/api/auth/register", json={
        "name": "Delta Dairy", "email": "Delta@Example.com", "password": "secret1"
    })
    assert response.status_code == 201
    vendor = response.json()["vendor"]
    assert vendor["email"] == "delta@example.com"
    assert "password_hash" not in vendor

    response = client.post("/api/auth/login", json={"email": "delta@example.com", "password": "secret1"})
    assert response.status_code == 200
    body = response.json()
    assert body["role"] == "vendor"
    assert body["user_id"] == vendor["id"]
    assert decode_access_token(body["token"]).id == vendor["id"]


def test_registration_with_taken_email_fails(client, vendor):
    response = client.post("/api/auth/register", json={
        "name": "Copycat", "email": "acme@example.com", "password": "secret1"
    })
    assert response.status_code == 400
    assert response.json()["message"] == get_message("vendor.email_taken")


def test_registration_body_validation_is_a_client_error(client):
    response = client.post("/api/auth/register", json={"name": "X", "email": "not-an-email", "password": "1"})
    assert response.status_code == 400
    body = response.json()
    assert body["error_code"] == "VALIDATION_ERROR"
    fields = {error["field"] for error in body["details"]["errors"]}
    assert "body.email" in fields
    assert "body.password" in fields


def test_admin_logs_in_by_email(client, admin):
    response = client.post("/api/auth/login", json={"email": "ADMIN@example.com", "password": "adminpass"})
    assert response.status_code == 200
    assert response.json()["role"] == "admin"


def test_customer_logs_in_by_phone(client, customer):
    response = client.post("/api/auth/login", json={"phone": "01200000001", "password": "custpass"})
    assert response.status_code == 200
    assert response.json()["role"] == "customer"
    assert response.json()["user_id"] == customer.id


def test_wrong_password_and_unknown_identifier_fail_alike(client, vendor):
    wrong_password = client.post("/api/auth/login", json={"email": "acme@example.com", "password": "nope"})
    unknown = client.post("/api/auth/login", json={"email": "ghost@example.com", "password": "nope"})
    assert wrong_password.status_code == unknown.status_code == 400
    assert wrong_password.json()["message"] == unknown.json()["message"] == get_message("auth.invalid_credentials")


def test_login_without_identifier_fails(client):
    response = client.post("/api/auth/login", json={"password": "whatever"})
    assert response.status_code == 400
    assert response.json()["message"] == get_message("auth.credentials_required")


def test_blocked_customer_login_reports_reason(client, admin, customer):
    response = client.post(
        "/api/auth/block-customer",
        json={"phone": customer.phone, "reason": "unpaid orders"},
        headers=auth_headers(admin)
    )
    assert response.status_code == 200
    assert response.json()["customer"]["is_blocked"] is True
    assert response.json()["customer"]["block_reason"] == "unpaid orders"

    response = client.post("/api/auth/login", json={"phone": customer.phone, "password": "custpass"})
    assert response.status_code == 403
    assert response.json()["details"]["reason"] == "unpaid orders"
    assert "unpaid orders" in response.json()["message"]

    # A wrong password still looks like any other bad credential
    response = client.post("/api/auth/login", json={"phone": customer.phone, "password": "wrong"})
    assert response.status_code == 400


def test_block_requires_reason(client, admin, customer):
    response = client.post(
        "/api/auth/block-customer",
        json={"phone": customer.phone, "reason": "   "},
        headers=auth_headers(admin)
    )
    assert response.status_code == 400
    assert response.json()["message"] == get_message("customer.block_reason_required")


def test_unblock_clears_reason(client, admin, customer):
    headers = auth_headers(admin)
    client.post("/api/auth/block-customer", json={"phone": customer.phone, "reason": "spam"}, headers=headers)
    response = client.post("/api/auth/unblock-customer", json={"phone": customer.phone}, headers=headers)
    assert response.status_code == 200
    assert response.json()["customer"]["is_blocked"] is False
    assert response.json()["customer"]["block_reason"] == ""

    response = client.post("/api/auth/login", json={"phone": customer.phone, "password": "custpass"})
    assert response.status_code == 200


def test_self_registered_customer_waits_for_approval(client, admin):
    response = client.post("/api/auth/register-customer-public", json={
        "name": "Mona", "phone": "01555555555", "password": "monapass"
    })
    assert response.status_code == 201
    assert response.json()["customer"]["is_approved"] is False

    response = client.post("/api/auth/login", json={"phone": "01555555555", "password": "monapass"})
    assert response.status_code == 403
    assert response.json()["message"] == get_message("auth.customer_pending")

    headers = auth_headers(admin)
    pending = client.get("/api/auth/pending-customers", headers=headers).json()
    assert [c["phone"] for c in pending] == ["01555555555"]
    assert client.get("/api/auth/customers", headers=headers).json() == []

    response = client.post("/api/auth/approve-customer", json={"phone": "01555555555"}, headers=headers)
    assert response.status_code == 200
    assert client.get("/api/auth/pending-customers", headers=headers).json() == []

    response = client.post("/api/auth/login", json={"phone": "01555555555", "password": "monapass"})
    assert response.status_code == 200


def test_rejecting_pending_customer_removes_it(client, admin):
    client.post("/api/auth/register-customer-public", json={
        "name": "Hany", "phone": "01666666666", "password": "hanypass"
    })
    headers = auth_headers(admin)
    response = client.post("/api/auth/reject-customer", json={"phone": "01666666666"}, headers=headers)
    assert response.status_code == 200
    assert client.get("/api/auth/pending-customers", headers=headers).json() == []

    response = client.post("/api/auth/reject-customer", json={"phone": "01666666666"}, headers=headers)
    assert response.status_code == 404


def test_admin_creates_approved_customer(client, admin):
    response = client.post(
        "/api/auth/register-customer",
        json={"name": "Laila", "phone": "01777777777", "password": "lailapass"},
        headers=auth_headers(admin)
    )
    assert response.status_code == 201
    assert response.json()["customer"]["is_approved"] is True


def test_customer_phone_must_be_eleven_digits(client, admin):
    response = client.post(
        "/api/auth/register-customer",
        json={"name": "Short", "phone": "12345", "password": "shortpass"},
        headers=auth_headers(admin)
    )
    assert response.status_code == 400


def test_duplicate_customer_phone_fails(client, admin, customer):
    response = client.post(
        "/api/auth/register-customer",
        json={"name": "Twin", "phone": customer.phone, "password": "twinpass"},
        headers=auth_headers(admin)
    )
    assert response.status_code == 400
    assert response.json()["message"] == get_message("customer.phone_taken")


def test_update_customer_changes_phone_and_password(client, admin, customer, other_customer):
    headers = auth_headers(admin)
    response = client.put("/api/auth/update-customer", json={
        "phone": customer.phone, "new_phone": other_customer.phone
    }, headers=headers)
    assert response.status_code == 400

    response = client.put("/api/auth/update-customer", json={
        "phone": customer.phone, "name": "Sara M.", "new_phone": "01999999999", "password": "newpass1"
    }, headers=headers)
    assert response.status_code == 200
    assert response.json()["customer"]["name"] == "Sara M."

    response = client.post("/api/auth/login", json={"phone": "01999999999", "password": "newpass1"})
    assert response.status_code == 200


def test_delete_customer(client, admin, customer):
    headers = auth_headers(admin)
    response = client.request("DELETE", "/api/auth/delete-customer", json={"phone": customer.phone}, headers=headers)
    assert response.status_code == 200
    response = client.request("DELETE", "/api/auth/delete-customer", json={"phone": customer.phone}, headers=headers)
    assert response.status_code == 404


def test_customer_administration_is_admin_only(client, vendor, customer):
    response = client.get("/api/auth/customers", headers=auth_headers(vendor))
    assert response.status_code == 403
    response = client.post(
        "/api/auth/block-customer",
        json={"phone": customer.phone, "reason": "x"},
        headers=auth_headers(customer)
    )
    assert response.status_code == 403


def test_registration_cannot_take_an_admin_email(client, admin):
    response = client.post("/api/auth/register", json={
        "name": "Impostor", "email": "Admin@Example.com", "password": "secret1"
    })
    assert response.status_code == 400
    assert response.json()["message"] == get_message("vendor.email_taken")

    response = client.post("/api/auth/login", json={"email": "admin@example.com", "password": "adminpass"})
    assert response.status_code == 200
    assert response.json()["role"] == "admin"
