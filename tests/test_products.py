from conftest import auth_headers, image_bytes
from core.messages import get_message

PRODUCT_FORM = {
    "name": "Basmati Rice",
    "type": "grain",
    "price": "45.75",
    "quantity_per_carton": "10",
    "manufacturer": "Delta Mills",
    "description": "5kg bags"
}


def _image(name="front.jpg"):
    return ("images", (name, image_bytes(fmt="JPEG"), "image/jpeg"))


def _video(name="demo.mp4"):
    return ("videos", (name, b"\x00\x00\x00\x18ftypmp42", "video/mp4"))


def test_vendor_creates_unapproved_product_with_media(client, vendor, upload_dir):
    response = client.post(
        "/api/products",
        data=PRODUCT_FORM,
        files=[_image(), _image("back.png"), _video()],
        headers=auth_headers(vendor)
    )
    assert response.status_code == 201
    product = response.json()
    assert product["approved"] is False
    assert product["vendor_id"] == vendor.id
    assert product["price"] == 45.75
    assert product["quantity_per_carton"] == 10
    assert len(product["images"]) == 2
    assert len(product["videos"]) == 1
    for name in product["images"] + product["videos"]:
        assert (upload_dir / name).exists()


def test_video_without_image_is_rejected_and_nothing_is_kept(client, vendor, upload_dir):
    response = client.post(
        "/api/products",
        data=PRODUCT_FORM,
        files=[_video()],
        headers=auth_headers(vendor)
    )
    assert response.status_code == 400
    assert response.json()["message"] == get_message("product.video_requires_image")
    assert list(upload_dir.iterdir()) == []


def test_missing_required_fields_are_listed(client, vendor):
    form = dict(PRODUCT_FORM)
    del form["manufacturer"]
    del form["price"]
    response = client.post("/api/products", data=form, headers=auth_headers(vendor))
    assert response.status_code == 400
    assert "price" in response.json()["message"]
    assert "manufacturer" in response.json()["message"]


def test_too_many_images_are_rejected(client, vendor, upload_dir):
    files = [_image(f"img{i}.jpg") for i in range(6)]
    response = client.post("/api/products", data=PRODUCT_FORM, files=files, headers=auth_headers(vendor))
    assert response.status_code == 400
    assert list(upload_dir.iterdir()) == []


def test_mismatched_media_type_is_rejected(client, vendor):
    files = [("images", ("clip.jpg", b"not really", "video/mp4"))]
    response = client.post("/api/products", data=PRODUCT_FORM, files=files, headers=auth_headers(vendor))
    assert response.status_code == 400
    assert response.json()["message"] == get_message("media.unsupported_type")


def test_video_sent_as_image_is_rejected(client, vendor):
    files = [("images", ("demo.mp4", b"\x00\x00", "video/mp4"))]
    response = client.post("/api/products", data=PRODUCT_FORM, files=files, headers=auth_headers(vendor))
    assert response.status_code == 400


def test_only_vendors_create_products(client, admin, customer):
    for account in (admin, customer):
        response = client.post("/api/products", data=PRODUCT_FORM, headers=auth_headers(account))
        assert response.status_code == 403


def test_public_catalog_lists_only_approved(client, vendor, make_product):
    approved_id = make_product(vendor, approved=True, name="Dates")
    make_product(vendor, name="Honey")

    response = client.get("/api/products")
    assert response.status_code == 200
    products = response.json()
    assert [p["id"] for p in products] == [approved_id]
    assert products[0]["vendor"] == {"id": vendor.id, "name": "Acme Foods"}


def test_vendor_catalog_and_my_products(client, vendor, other_vendor, make_product):
    approved_id = make_product(vendor, approved=True)
    pending_id = make_product(vendor)
    make_product(other_vendor, approved=True)

    public = client.get(f"/api/products/vendor/{vendor.id}").json()
    assert [p["id"] for p in public] == [approved_id]

    mine = client.get("/api/products/my-products", headers=auth_headers(vendor)).json()
    assert {p["id"] for p in mine} == {approved_id, pending_id}


def test_admin_lists_every_product(client, admin, vendor, other_vendor, make_product):
    make_product(vendor)
    make_product(other_vendor, approved=True)
    response = client.get("/api/products/all-products", headers=auth_headers(admin))
    assert response.status_code == 200
    assert len(response.json()) == 2


def test_approval_is_idempotent_and_reversible(client, admin, vendor, make_product):
    product_id = make_product(vendor)
    headers = auth_headers(admin)

    first = client.put(f"/api/products/{product_id}/approve", headers=headers)
    second = client.put(f"/api/products/{product_id}/approve", headers=headers)
    assert first.status_code == second.status_code == 200
    assert second.json()["approved"] is True
    assert len(client.get("/api/products").json()) == 1

    response = client.put(f"/api/products/{product_id}/unapprove", headers=headers)
    assert response.json()["approved"] is False
    assert client.get("/api/products").json() == []


def test_approving_unknown_product_is_not_found(client, admin):
    response = client.put("/api/products/missing/approve", headers=auth_headers(admin))
    assert response.status_code == 404


def test_vendor_cannot_approve(client, vendor, make_product):
    product_id = make_product(vendor)
    response = client.put(f"/api/products/{product_id}/approve", headers=auth_headers(vendor))
    assert response.status_code == 403


def test_foreign_and_missing_products_look_the_same(client, vendor, other_vendor, make_product):
    product_id = make_product(vendor)
    headers = auth_headers(other_vendor)

    foreign = client.put(f"/api/products/{product_id}", data={"name": "Hijacked"}, headers=headers)
    missing = client.put("/api/products/does-not-exist", data={"name": "Hijacked"}, headers=headers)
    assert foreign.status_code == missing.status_code == 404
    assert foreign.json()["message"] == missing.json()["message"]

    response = client.delete(f"/api/products/{product_id}", headers=headers)
    assert response.status_code == 404
    assert len(client.get("/api/products/my-products", headers=auth_headers(vendor)).json()) == 1


def test_update_replaces_images_and_removes_old_files(client, vendor, upload_dir):
    headers = auth_headers(vendor)
    created = client.post("/api/products", data=PRODUCT_FORM, files=[_image()], headers=headers).json()
    old_image = created["images"][0]

    response = client.put(
        f"/api/products/{created['id']}",
        data={"price": "50", "name": "Premium Rice"},
        files=[_image("new.jpg")],
        headers=headers
    )
    assert response.status_code == 200
    updated = response.json()
    assert updated["name"] == "Premium Rice"
    assert updated["price"] == 50.0
    assert updated["manufacturer"] == "Delta Mills"
    assert len(updated["images"]) == 1
    assert updated["images"][0] != old_image
    assert not (upload_dir / old_image).exists()
    assert (upload_dir / updated["images"][0]).exists()


def test_update_without_media_keeps_existing_files(client, vendor, upload_dir):
    headers = auth_headers(vendor)
    created = client.post("/api/products", data=PRODUCT_FORM, files=[_image()], headers=headers).json()

    response = client.put(f"/api/products/{created['id']}", data={"description": "Updated"}, headers=headers)
    assert response.status_code == 200
    assert response.json()["images"] == created["images"]
    assert (upload_dir / created["images"][0]).exists()


def test_update_rejects_negative_price(client, vendor, make_product):
    product_id = make_product(vendor)
    response = client.put(f"/api/products/{product_id}", data={"price": "-3"}, headers=auth_headers(vendor))
    assert response.status_code == 400


def test_delete_removes_product_and_media(client, vendor, upload_dir):
    headers = auth_headers(vendor)
    created = client.post("/api/products", data=PRODUCT_FORM, files=[_image(), _video()], headers=headers).json()

    response = client.delete(f"/api/products/{created['id']}", headers=headers)
    assert response.status_code == 200
    assert response.json()["message"] == get_message("product.deleted")
    assert list(upload_dir.iterdir()) == []
    assert client.get("/api/products/my-products", headers=headers).json() == []


def test_delete_tolerates_missing_media_files(client, vendor, make_product):
    product_id = make_product(vendor, images=["gone.jpg"])
    response = client.delete(f"/api/products/{product_id}", headers=auth_headers(vendor))
    assert response.status_code == 200


def test_non_finite_prices_are_rejected(client, vendor, make_product, upload_dir):
    headers = auth_headers(vendor)
    for price in ("nan", "inf", "-inf"):
        response = client.post("/api/products", data=dict(PRODUCT_FORM, price=price), files=[_image()], headers=headers)
        assert response.status_code == 400
    assert client.get("/api/products/my-products", headers=headers).json() == []
    assert list(upload_dir.iterdir()) == []

    product_id = make_product(vendor)
    response = client.put(f"/api/products/{product_id}", data={"price": "nan"}, headers=headers)
    assert response.status_code == 400
