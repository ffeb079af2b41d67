"""
TripNest Backend - Item Route Tests
=====================================

What:  POST /add (multipart with images), GET /items, GET /viewDetail.
How:   Images are written into the per-test upload directory and fetched
       back through the static /uploads mount.
"""

import uuid
from pathlib import Path

import pytest

from tripnest.models.user import Role

ITEM_FIELDS = {
    "name": "Old Lighthouse",
    "shortDetail": "Sunset views",
    "detail": "A restored 1890 lighthouse.",
    "latitude": "41.5",
    "longitude": "-70.2",
    "address": "Cape Rd",
    "placeId": "place-1",
    "category": "landmark",
    "specialDay": "14",
    "specialMonth": "7",
}


def _images(content: bytes, count: int, ext: str = "jpg"):
    return [("images", (f"photo{i}.{ext}", content, "image/jpeg")) for i in range(count)]


def _stored_files(settings):
    upload_dir = Path(settings.upload_dir)
    return list(upload_dir.iterdir()) if upload_dir.exists() else []


async def _add_hotel(client, name="Seaside Inn") -> str:
    response = await client.post(
        "/addHotel",
        json={"name": name, "address": "1 Beach Rd", "latitude": 10.0, "longitude": 20.0},
    )
    assert response.status_code == 201
    return response.json()["id"]


class TestAddItem:
    @pytest.mark.asyncio
    async def test_three_images_yield_three_upload_paths(
        self, client, login_as, sample_image_bytes
    ):
        await login_as(Role.OFFICER)

        response = await client.post(
            "/add", data=ITEM_FIELDS, files=_images(sample_image_bytes, 3)
        )

        assert response.status_code == 201
        item_id = response.json()["id"]

        item = (await client.get(f"/viewDetail/{item_id}")).json()
        assert len(item["images"]) == 3
        assert len(set(item["images"])) == 3
        for path in item["images"]:
            assert path.startswith("/uploads/")
            served = await client.get(path)
            assert served.status_code == 200
            assert served.content == sample_image_bytes

    @pytest.mark.asyncio
    async def test_fields_are_parsed_and_aliased(self, client, login_as):
        await login_as(Role.OFFICER)
        hotel_id = await _add_hotel(client)

        response = await client.post("/add", data={**ITEM_FIELDS, "hotels": hotel_id})
        item = (await client.get("/viewDetail", params={"item_id": response.json()["id"]})).json()

        assert item["name"] == "Old Lighthouse"
        assert item["shortDetail"] == "Sunset views"
        assert item["latitude"] == 41.5
        assert item["longitude"] == -70.2
        assert item["specialDate"] == {"day": 14, "month": 7}
        assert item["hotels"] == [hotel_id]
        assert item["images"] == []

    @pytest.mark.asyncio
    async def test_several_hotels(self, client, login_as):
        await login_as(Role.ADMIN)
        first = await _add_hotel(client, "One")
        second = await _add_hotel(client, "Two")

        response = await client.post("/add", data={**ITEM_FIELDS, "hotels": [first, second]})
        item = (await client.get(f"/viewDetail/{response.json()['id']}")).json()

        assert sorted(item["hotels"]) == sorted([first, second])

    @pytest.mark.asyncio
    async def test_more_than_seven_images_is_400(
        self, client, login_as, settings, sample_image_bytes
    ):
        await login_as(Role.OFFICER)

        response = await client.post(
            "/add", data=ITEM_FIELDS, files=_images(sample_image_bytes, 8)
        )

        assert response.status_code == 400
        assert _stored_files(settings) == []

    @pytest.mark.asyncio
    async def test_unsupported_image_type_is_400(self, client, login_as, settings):
        await login_as(Role.OFFICER)

        response = await client.post(
            "/add", data=ITEM_FIELDS, files=[("images", ("notes.pdf", b"%PDF-1.4", "application/pdf"))]
        )

        assert response.status_code == 400
        assert _stored_files(settings) == []

    @pytest.mark.asyncio
    async def test_unparseable_number_is_400(self, client, login_as):
        await login_as(Role.OFFICER)

        response = await client.post("/add", data={**ITEM_FIELDS, "latitude": "far north"})

        assert response.status_code == 400
        fields = [e["field"] for e in response.json()["details"]["errors"]]
        assert "latitude" in fields

    @pytest.mark.asyncio
    async def test_missing_special_date_is_400(self, client, login_as):
        await login_as(Role.OFFICER)
        fields = {k: v for k, v in ITEM_FIELDS.items() if k != "specialMonth"}

        response = await client.post("/add", data=fields)

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_unknown_hotel_removes_stored_images(
        self, client, login_as, settings, sample_image_bytes
    ):
        await login_as(Role.OFFICER)

        response = await client.post(
            "/add",
            data={**ITEM_FIELDS, "hotels": str(uuid.uuid4())},
            files=_images(sample_image_bytes, 2),
        )

        assert response.status_code == 400
        assert response.json()["details"]["field"] == "hotels"
        assert _stored_files(settings) == []
        assert (await client.get("/items")).json() == []

    @pytest.mark.asyncio
    async def test_user_role_is_forbidden(self, client, login_as):
        await login_as(Role.USER)

        response = await client.post("/add", data=ITEM_FIELDS)

        assert response.status_code == 403


class TestReadItems:
    @pytest.mark.asyncio
    async def test_list_items(self, client, login_as):
        await login_as(Role.OFFICER)
        await client.post("/add", data=ITEM_FIELDS)
        await client.post("/add", data={**ITEM_FIELDS, "name": "Harbor"})

        response = await client.get("/items")

        assert response.status_code == 200
        assert sorted(i["name"] for i in response.json()) == ["Harbor", "Old Lighthouse"]

    @pytest.mark.asyncio
    async def test_unknown_item_is_404(self, client):
        response = await client.get("/viewDetail", params={"item_id": str(uuid.uuid4())})

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_malformed_item_id_is_404(self, client):
        by_query = await client.get("/viewDetail", params={"item_id": "12345"})
        by_path = await client.get("/viewDetail/12345")

        assert by_query.status_code == 404
        assert by_path.status_code == 404

    @pytest.mark.asyncio
    async def test_missing_item_id_is_400(self, client):
        response = await client.get("/viewDetail")

        assert response.status_code == 400
