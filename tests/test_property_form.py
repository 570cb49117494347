import json

import httpx
import pytest

from proptech.errors import PropertyFormError
from proptech.forms.property_form import PropertyForm, is_pending
from proptech.schemas.media import FloorPlan, PropertyNearbyFacility, RentalConfig, UploadFile
from proptech.schemas.property import Property, PropertyFormData

def valid_data(**overrides) -> PropertyFormData:
    data = {
        "title": "Casa en Villa Morra",
        "description": "<p>Hermosa casa con <b>jardín</b> amplio</p>",
        "price": 250000,
        "currency": "USD",
        "type": "house",
        "property_status_id": 1,
        "agent_id": 4,
        "address": "Av. España 123",
        "city": "Asunción",
        "state": "Central",
    }
    data.update(overrides)
    return PropertyFormData(**data)

def photo(name="a.jpg") -> UploadFile:
    return UploadFile(filename=name, content=b"\xff\xd8data", content_type="image/jpeg")

@pytest.mark.parametrize("title, ok", [("", False), ("a", False), ("ab", False), ("abc", True), ("x" * 100, True), ("x" * 101, False)])
def test_validate_title_length(title, ok):
    form = PropertyForm(initial=valid_data(title=title))
    assert form.validate(["title"]) is ok
    assert ("title" in form.errors) is not ok

@pytest.mark.parametrize("price, ok", [(0, False), (-5, False), (None, False), (1, True)])
def test_validate_price_positive(price, ok):
    form = PropertyForm(initial=valid_data(price=price))
    assert form.validate(["price"]) is ok

def test_description_length_ignores_html():
    form = PropertyForm(initial=valid_data(description="<p><strong>corta</strong></p>"))
    assert not form.validate(["description"])
    assert form.errors["description"] == "La descripción debe tener entre 10 y 5000 caracteres"

def test_full_validation_accepts_complete_form():
    form = PropertyForm(initial=valid_data())
    assert form.validate() is True
    assert form.errors == {}

def test_images_rule_only_when_requested():
    form = PropertyForm(initial=valid_data())
    assert form.validate()
    assert not form.validate(["images"])
    assert form.errors["images"] == "Se recomienda subir al menos una imagen de la propiedad"

def test_unknown_field_is_rejected():
    form = PropertyForm()
    with pytest.raises(PropertyFormError):
        form.handle_change("nope", 1)

def test_handle_change_coerces_numbers():
    form = PropertyForm()
    form.handle_change("price", "1500.5")
    form.handle_change("bedrooms", "3")
    form.handle_change("bathrooms", "")
    form.handle_change("propertyStatusId", "7")
    form.handle_change("lot_size", "abc")
    form.handle_change("additional_property_types", "house")
    assert form.form_data.price == 1500.5
    assert form.form_data.bedrooms == 3
    assert form.form_data.bathrooms is None
    assert form.form_data.property_status_id == 7
    assert form.form_data.lot_size is None
    assert form.form_data.additional_property_types == []

def test_toggles():
    form = PropertyForm()
    form.toggle_amenity(3)
    form.toggle_amenity(5)
    form.toggle_amenity(3)
    form.toggle_boolean_field("featured")
    assert form.form_data.amenities == [5]
    assert form.form_data.featured is True
    with pytest.raises(PropertyFormError):
        form.toggle_boolean_field("title")

def test_gallery_previews_track_pending_files():
    form = PropertyForm(initial=valid_data(images=["http://cdn.test/old.jpg"]))
    keys = form.add_gallery_images([photo("a.jpg"), photo("b.jpg")])
    assert all(is_pending(k) for k in keys)
    assert form.form_data.images == ["http://cdn.test/old.jpg", *keys]

    form.reorder_images(2, 0)
    assert form.form_data.images[0] == keys[1]

    form.remove_image(0)
    assert keys[1] not in form.pending.gallery
    assert form.form_data.images == ["http://cdn.test/old.jpg", keys[0]]

def test_is_land():
    assert PropertyForm(initial=valid_data(type="Terreno urbano")).is_land
    assert not PropertyForm(initial=valid_data(type="house")).is_land

def test_payload_drops_blanks_previews_and_side_resources():
    form = PropertyForm(initial=valid_data(
        description="  ",
        zip="",
        images=["http://cdn.test/1.jpg"],
        floor_plans=[FloorPlan(title="Planta baja")],
        rental_config=RentalConfig(enabled=True),
        currency_id=2,
    ))
    form.add_featured_image(photo())
    form.add_gallery_images([photo("b.jpg")])

    payload = form.build_property_payload(status_id=9)

    assert "description" not in payload
    assert "zip" not in payload
    assert "latitude" not in payload
    assert "featuredImage" not in payload
    assert payload["images"] == ["http://cdn.test/1.jpg"]
    assert payload["propertyStatusId"] == 9
    assert payload["currencyId"] == 2
    assert "currency" not in payload
    for key in ("floorPlans", "nearbyFacilities", "rentalConfig"):
        assert key not in payload
    assert payload["title"] == "Casa en Villa Morra"

def new_property_routes(backend, property_id=10):
    backend.on("POST", "/api/properties", json={"id": property_id, "title": "Casa en Villa Morra"})
    backend.on("DELETE", f"/api/properties/{property_id}/floor-plans", status=204)
    backend.on("GET", f"/api/properties/{property_id}/nearby-facilities", json=[])

@pytest.mark.asyncio
async def test_empty_floor_plans_delete_without_post(backend, notifier):
    new_property_routes(backend)
    form = PropertyForm(initial=valid_data(), client=backend.client(), notifier=notifier)

    assert await form.perform_save() == 10
    assert form.property_id == 10
    assert len(backend.requests("DELETE", "/api/properties/10/floor-plans")) == 1
    assert backend.requests("POST", "/api/properties/10/floor-plans") == []
    assert notifier.last.variant == "success"

@pytest.mark.asyncio
async def test_floor_plans_replaced_with_uploaded_images(backend, notifier):
    new_property_routes(backend)
    backend.on("POST", "/api/files/upload/floor-plans", json={"url": "http://cdn.test/plan.png"})
    backend.on("POST", "/api/properties/10/floor-plans", json=[])
    form = PropertyForm(initial=valid_data(), client=backend.client(), notifier=notifier)
    form.handle_floor_plans_change([{"title": "Planta baja", "bedrooms": 2}])
    form.queue_floor_plan_image(0, photo("plan.png"))

    await form.perform_save()

    posted = json.loads(backend.requests("POST", "/api/properties/10/floor-plans")[0].content)
    assert posted[0]["image"] == "http://cdn.test/plan.png"
    assert posted[0]["propertyId"] == 10
    assert posted[0]["id"] is None
    assert form.pending.floor_plan_images == {}

@pytest.mark.asyncio
async def test_nearby_facilities_full_replacement(backend, notifier):
    backend.on("PUT", "/api/properties/5", json={"id": 5})
    backend.on("DELETE", "/api/properties/5/floor-plans", status=204)
    backend.on("GET", "/api/properties/5/nearby-facilities", json=[
        {"id": 1, "nearbyFacilityId": 100},
        {"id": 2, "nearbyFacilityId": 200},
    ])
    backend.on("DELETE", "/api/properties/5/nearby-facilities/100", status=204)
    backend.on("DELETE", "/api/properties/5/nearby-facilities/200", status=204)

    def add(request):
        body = json.loads(request.content)
        if body["nearbyFacilityId"] == 100:
            return httpx.Response(409, json={"message": "duplicado"})
        return httpx.Response(201, json={"id": 3, **body})

    backend.on("POST", "/api/properties/5/nearby-facilities", handler=add)
    form = PropertyForm(initial=valid_data(), property_id=5, client=backend.client(), notifier=notifier)
    form.handle_nearby_facilities_change([
        PropertyNearbyFacility(nearby_facility_id=100, distance_km=0.5),
        {"nearbyFacilityId": 300, "walkingTimeMinutes": 4},
    ])

    assert await form.perform_save() == 5
    assert len(backend.requests("DELETE", "/api/properties/5/nearby-facilities/")) == 2
    assert len(backend.requests("POST", "/api/properties/5/nearby-facilities")) == 2
    assert all(t.variant != "warning" for t in notifier.toasts)

@pytest.mark.asyncio
async def test_draft_uses_draft_status(backend, notifier):
    new_property_routes(backend)
    backend.on("GET", "/api/property-status", json=[
        {"id": 1, "name": "Activo", "code": "ACTIVE"},
        {"id": 7, "name": "Borrador", "code": "DRAFT"},
    ])
    form = PropertyForm(initial=PropertyFormData(title="x"), client=backend.client(), notifier=notifier)

    assert await form.save_draft() == 10
    sent = json.loads(backend.requests("POST", "/api/properties")[0].content)
    assert sent["propertyStatusId"] == 7
    assert form.draft_property_id == 10
    assert notifier.last.title == "Borrador guardado"

@pytest.mark.asyncio
async def test_pending_images_uploaded_after_create(backend, notifier):
    new_property_routes(backend)
    backend.on("POST", "/api/files/upload/properties", json={"url": "http://cdn.test/a.jpg"})
    backend.on("PUT", "/api/properties/10/images", status=204)
    form = PropertyForm(initial=valid_data(), client=backend.client(), notifier=notifier)
    form.add_gallery_images([photo()])

    await form.perform_save()

    sent = json.loads(backend.requests("PUT", "/api/properties/10/images")[0].content)
    assert sent == {"imageUrls": ["http://cdn.test/a.jpg"], "featuredImageUrl": "http://cdn.test/a.jpg"}
    assert form.form_data.images == ["http://cdn.test/a.jpg"]
    assert not form.pending.has_images

@pytest.mark.asyncio
async def test_side_sync_failure_is_a_warning(backend, notifier):
    new_property_routes(backend)
    backend.on("DELETE", "/api/properties/10/floor-plans", status=500)
    form = PropertyForm(initial=valid_data(), client=backend.client(), notifier=notifier)

    assert await form.perform_save() == 10
    assert [t.title for t in notifier.toasts if t.variant == "warning"] == ["Planos de planta"]
    assert notifier.last.variant == "success"

@pytest.mark.asyncio
async def test_failed_property_write_returns_none(backend, notifier):
    backend.on("POST", "/api/properties", status=400, json={"message": "precio inválido"})
    form = PropertyForm(initial=valid_data(), client=backend.client(), notifier=notifier)

    assert await form.perform_save() is None
    assert form.property_id is None
    assert notifier.last.variant == "destructive"
    assert "precio inválido" in notifier.last.description
    assert form.saving is False

@pytest.mark.asyncio
async def test_rental_config_saved_only_when_enabled(backend, notifier):
    new_property_routes(backend)
    backend.on("POST", "/api/rental-properties", json={"id": 1, "propertyId": 10})
    backend.on("PUT", "/api/properties/10", json={"id": 10})
    form = PropertyForm(initial=valid_data(rental_config=RentalConfig(enabled=False)), client=backend.client(), notifier=notifier)
    await form.perform_save()
    assert backend.requests("POST", "/api/rental-properties") == []

    form.form_data.rental_config = RentalConfig(enabled=True, price_per_night=150000)
    await form.perform_save()
    sent = json.loads(backend.requests("POST", "/api/rental-properties")[0].content)
    assert sent["propertyId"] == 10
    assert sent["pricePerNight"] == 150000
    assert "enabled" not in sent

@pytest.mark.asyncio
async def test_submit_blocks_invalid_form(backend, notifier):
    form = PropertyForm(initial=valid_data(title=""), client=backend.client(), notifier=notifier)
    assert await form.submit() is None
    assert backend.calls == []
    assert "El título es obligatorio" in notifier.last.items

@pytest.mark.asyncio
async def test_publish_requires_saved_property():
    form = PropertyForm()
    with pytest.raises(PropertyFormError):
        await form.publish_property()

@pytest.mark.asyncio
async def test_publish_marks_status(backend):
    backend.on("POST", "/api/properties/10/publish", json={"id": 10})
    form = PropertyForm(initial=valid_data(), property_id=10, client=backend.client())
    await form.publish_property()
    assert form.form_data.status == "active"
    assert form.form_data.property_status_code == "ACTIVE"

@pytest.mark.asyncio
async def test_agent_assigned_from_user_email(backend):
    backend.on("GET", "/api/agents", json=[{"id": 4, "firstName": "Ana", "email": "ana@example.com", "agencyId": 2}])
    form = PropertyForm(client=backend.client())
    await form.assign_agent_from_user("ANA@example.com")
    assert form.form_data.agent_id == 4
    assert form.form_data.agency_id == 2

@pytest.mark.asyncio
async def test_private_files_upload_immediately(backend):
    backend.on("POST", "/api/files/upload/private", json={"url": "http://cdn.test/contrato.pdf"})
    form = PropertyForm(client=backend.client())
    await form.add_private_files([UploadFile(filename="contrato.pdf", content=b"%PDF", content_type="application/pdf")])
    assert [f.url for f in form.form_data.private_files] == ["http://cdn.test/contrato.pdf"]
    form.remove_private_file(0)
    assert form.form_data.private_files == []

def test_reset_clears_pending():
    form = PropertyForm(initial=valid_data())
    form.add_gallery_images([photo()])
    form.reset()
    assert form.form_data.title == ""
    assert form.form_data.property_status_id == 1
    assert not form.pending.has_images

def test_backend_dto_nulls_fall_back_to_defaults(property_dto):
    prop = Property.model_validate(property_dto(featuredImage=None, floorPlans=[{"id": 1, "title": None, "bedrooms": None}]))
    assert prop.address == ""
    assert prop.zip == ""
    assert prop.available_from == ""
    assert prop.featured is False
    assert prop.bathrooms == 0
    assert prop.amenities == []
    assert prop.currency == "USD"
    assert prop.currency_id == 1
    assert prop.parking == 2
    assert prop.type == "Casa"
    assert prop.floor_plans[0].title == ""
    assert prop.floor_plans[0].bedrooms == 0

@pytest.mark.asyncio
async def test_save_with_backend_dto_response(backend, notifier, property_dto):
    backend.on("POST", "/api/properties", json=property_dto(10))
    backend.on("DELETE", "/api/properties/10/floor-plans", status=204)
    backend.on("GET", "/api/properties/10/nearby-facilities", json=[])
    form = PropertyForm(initial=valid_data(), client=backend.client(), notifier=notifier)

    assert await form.perform_save() == 10
    assert len(backend.requests("DELETE", "/api/properties/10/floor-plans")) == 1
    assert notifier.last.variant == "success"

@pytest.mark.asyncio
async def test_unreadable_save_response_is_reported(backend, notifier):
    backend.on("POST", "/api/properties", json={"title": "sin id"})
    form = PropertyForm(initial=valid_data(), client=backend.client(), notifier=notifier)

    assert await form.perform_save() is None
    assert notifier.last.variant == "destructive"
    assert "respuesta inesperada" in notifier.last.description

@pytest.mark.asyncio
async def test_failed_floor_plan_upload_is_retried_on_next_save(backend, notifier):
    new_property_routes(backend)
    backend.on("PUT", "/api/properties/10", json={"id": 10})
    backend.on("POST", "/api/properties/10/floor-plans", json=[])
    attempts = []

    def upload(request):
        attempts.append(request)
        if len(attempts) == 1:
            return httpx.Response(500)
        return httpx.Response(200, json={"url": "http://cdn.test/plan.png"})

    backend.on("POST", "/api/files/upload/floor-plans", handler=upload)
    form = PropertyForm(initial=valid_data(), client=backend.client(), notifier=notifier)
    form.handle_floor_plans_change([{"title": "Planta baja"}])
    key = form.queue_floor_plan_image(0, photo("plan.png"))

    await form.perform_save()
    assert form.form_data.floor_plans[0].image == key
    assert key in form.pending.floor_plan_images
    assert backend.requests("DELETE", "/api/properties/10/floor-plans") == []

    await form.perform_save()
    posted = json.loads(backend.requests("POST", "/api/properties/10/floor-plans")[0].content)
    assert posted[0]["image"] == "http://cdn.test/plan.png"
    assert form.pending.floor_plan_images == {}
    assert [t.title for t in notifier.toasts if t.variant == "warning"] == ["Planos de planta"]

@pytest.mark.asyncio
async def test_featured_gallery_preview_uploaded_once(backend, notifier):
    new_property_routes(backend)
    backend.on("POST", "/api/files/upload/properties", json={"url": "http://cdn.test/a.jpg"})
    backend.on("PUT", "/api/properties/10/images", status=204)
    form = PropertyForm(initial=valid_data(), client=backend.client(), notifier=notifier)
    first, second = form.add_gallery_images([photo("a.jpg"), photo("b.jpg")])
    form.select_featured_image(second)

    await form.perform_save()

    assert len(backend.requests("POST", "/api/files/upload/properties")) == 2
    sent = json.loads(backend.requests("PUT", "/api/properties/10/images")[0].content)
    assert sent["featuredImageUrl"] == "http://cdn.test/a.jpg"

def test_removing_featured_preview_clears_featured():
    form = PropertyForm(initial=valid_data())
    (key,) = form.add_gallery_images([photo()])
    form.select_featured_image(key)
    form.remove_image(0)
    assert form.form_data.featured_image == ""
