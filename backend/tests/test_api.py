"""
Journal Board Backend — API Integration Tests
===============================================

What:  End-to-end tests through the FastAPI app with HTTPX.
Why:   Verifies routing, token query parameters, the {"data": ...} envelope
       and the error → HTTP status mapping together.
How:   Every row is created through the API; the in-memory database is
       shared with the app via the get_db_session override.

What we test:
    ✅ Health endpoints
    ✅ Board creation returns tokens and share links
    ✅ 401 / 404 / 409 / 422 mapping with the error envelope
    ✅ Page moves and element restacking through the routes
    ✅ Image upload and serving; the size limit counts the file, not the multipart envelope
    ✅ Anonymous page listing and recap
"""

from unittest.mock import patch

import pytest

from app.config import settings

API = "/api/v1/boards"


async def _create_board(client, title="Road trip"):
    response = await client.post(API, json={"title": title, "skin": "notebook"})
    assert response.status_code == 201
    return response.json()["data"]["board"]


async def _create_page(client, board, title, date="2024-01-15T12:00:00Z", **extra):
    response = await client.post(
        f"{API}/{board['id']}/pages",
        params={"edit_token": board["edit_token"]},
        json={"title": title, "date": date, **extra},
    )
    assert response.status_code == 201
    return response.json()["data"]


async def _create_element(client, board, page, kind="text", payload=None):
    response = await client.post(
        f"{API}/{board['id']}/pages/{page['id']}/elements",
        params={"edit_token": board["edit_token"]},
        json={"kind": kind, "x": 0, "y": 0, "w": 10, "h": 10, "payload": payload or {"text": "x"}},
    )
    assert response.status_code == 201
    return response.json()["data"]


class TestHealth:

    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"

    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, test_client):
        response = await test_client.get("/health", headers={"X-Request-ID": "abc123"})
        assert response.headers["X-Request-ID"] == "abc123"


class TestBoardsApi:

    @pytest.mark.asyncio
    async def test_create_board(self, test_client):
        response = await test_client.post(API, json={"title": "Road trip"})

        assert response.status_code == 201
        data = response.json()["data"]
        board = data["board"]
        assert board["skin"] == "default"
        assert board["edit_token"] != board["public_token"]
        assert data["edit_url"].startswith(f"http://frontend.test/board/{board['id']}/edit")
        assert board["public_token"] in data["public_url"]

    @pytest.mark.asyncio
    async def test_lookup_by_tokens(self, test_client):
        board = await _create_board(test_client)

        edit = await test_client.get(f"{API}/edit/{board['edit_token']}")
        public = await test_client.get(f"{API}/public/{board['public_token']}")

        assert edit.json()["data"]["edit_token"] == board["edit_token"]
        assert "edit_token" not in public.json()["data"]

    @pytest.mark.asyncio
    async def test_get_board_without_token_is_401(self, test_client):
        board = await _create_board(test_client)

        response = await test_client.get(f"{API}/{board['id']}")

        assert response.status_code == 401
        body = response.json()
        assert body["error"]["code"] == "UNAUTHORIZED"
        assert "request_id" in body

    @pytest.mark.asyncio
    async def test_unknown_board_is_404(self, test_client):
        response = await test_client.get(
            f"{API}/00000000-0000-0000-0000-000000000000",
            params={"public_token": "00000000-0000-0000-0000-000000000001"},
        )
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"

    @pytest.mark.asyncio
    async def test_invalid_body_is_422(self, test_client):
        response = await test_client.post(API, json={"title": "", "skin": "glitter"})
        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_update_and_delete_board(self, test_client):
        board = await _create_board(test_client)
        token = {"edit_token": board["edit_token"]}

        updated = await test_client.put(f"{API}/{board['id']}", params=token, json={"title": "Renamed"})
        assert updated.status_code == 200
        assert updated.json()["data"]["title"] == "Renamed"

        deleted = await test_client.delete(f"{API}/{board['id']}", params=token)
        assert deleted.status_code == 204

        gone = await test_client.get(f"{API}/edit/{board['edit_token']}")
        assert gone.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_with_public_token_is_401(self, test_client):
        board = await _create_board(test_client)
        response = await test_client.delete(
            f"{API}/{board['id']}", params={"edit_token": board["public_token"]},
        )
        assert response.status_code == 401


class TestPagesApi:

    @pytest.mark.asyncio
    async def test_move_page_to_front(self, test_client):
        board = await _create_board(test_client)
        await _create_page(test_client, board, "A")
        await _create_page(test_client, board, "B")
        c = await _create_page(test_client, board, "C")

        response = await test_client.put(
            f"{API}/{board['id']}/pages/{c['id']}",
            params={"edit_token": board["edit_token"]},
            json={"order_idx": 0},
        )
        assert response.status_code == 200

        listing = await test_client.get(f"{API}/{board['id']}/pages")
        pages = listing.json()["data"]["pages"]
        assert [(page["title"], page["order_idx"]) for page in pages] == [("C", 0), ("A", 1), ("B", 2)]

    @pytest.mark.asyncio
    async def test_anonymous_listing_but_not_anonymous_create(self, test_client):
        board = await _create_board(test_client)

        listing = await test_client.get(f"{API}/{board['id']}/pages")
        assert listing.status_code == 200
        assert listing.json()["data"]["total"] == 0

        create = await test_client.post(
            f"{API}/{board['id']}/pages", json={"title": "A", "date": "2024-01-15T12:00:00Z"},
        )
        assert create.status_code == 401

    @pytest.mark.asyncio
    async def test_delete_page(self, test_client):
        board = await _create_board(test_client)
        page = await _create_page(test_client, board, "A")
        await _create_element(test_client, board, page)

        response = await test_client.delete(
            f"{API}/{board['id']}/pages/{page['id']}", params={"edit_token": board["edit_token"]},
        )
        assert response.status_code == 204

        missing = await test_client.get(f"{API}/{board['id']}/pages/{page['id']}")
        assert missing.status_code == 404


class TestElementsApi:

    @pytest.mark.asyncio
    async def test_restack_flow(self, test_client):
        board = await _create_board(test_client)
        page = await _create_page(test_client, board, "A")
        bottom = await _create_element(test_client, board, page)
        top = await _create_element(test_client, board, page, kind="sticker", payload={"sticker_id": "sun"})
        assert (bottom["z"], top["z"]) == (0, 1)

        response = await test_client.put(
            f"{API}/{board['id']}/pages/{page['id']}/elements/reorder",
            params={"edit_token": board["edit_token"]},
            json={"elements": [{"id": bottom["id"], "z": 1}, {"id": top["id"], "z": 0}]},
        )
        assert response.status_code == 204

        listing = await test_client.get(f"{API}/{board['id']}/pages/{page['id']}/elements")
        ids = [element["id"] for element in listing.json()["data"]["elements"]]
        assert ids == [top["id"], bottom["id"]]

    @pytest.mark.asyncio
    async def test_reorder_accepts_updates_key(self, test_client):
        board = await _create_board(test_client)
        page = await _create_page(test_client, board, "A")
        element = await _create_element(test_client, board, page)

        response = await test_client.put(
            f"{API}/{board['id']}/pages/{page['id']}/elements/reorder",
            params={"edit_token": board["edit_token"]},
            json={"updates": [{"id": element["id"], "z": 3}]},
        )
        assert response.status_code == 204

    @pytest.mark.asyncio
    async def test_reorder_with_foreign_element_is_409(self, test_client):
        board = await _create_board(test_client)
        page_p = await _create_page(test_client, board, "P")
        page_q = await _create_page(test_client, board, "Q")
        mine = await _create_element(test_client, board, page_p)
        foreign = await _create_element(test_client, board, page_q)

        response = await test_client.put(
            f"{API}/{board['id']}/pages/{page_p['id']}/elements/reorder",
            params={"edit_token": board["edit_token"]},
            json={"elements": [{"id": mine["id"], "z": 1}, {"id": foreign["id"], "z": 0}]},
        )

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "CONSISTENCY_VIOLATION"

        listing = await test_client.get(f"{API}/{board['id']}/pages/{page_p['id']}/elements")
        assert listing.json()["data"]["elements"][0]["z"] == 0

    @pytest.mark.asyncio
    async def test_zero_width_is_422(self, test_client):
        board = await _create_board(test_client)
        page = await _create_page(test_client, board, "A")

        response = await test_client.post(
            f"{API}/{board['id']}/pages/{page['id']}/elements",
            params={"edit_token": board["edit_token"]},
            json={"kind": "text", "x": 0, "y": 0, "w": 0, "h": 10},
        )
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_unknown_kind_is_422(self, test_client):
        board = await _create_board(test_client)
        page = await _create_page(test_client, board, "A")

        response = await test_client.post(
            f"{API}/{board['id']}/pages/{page['id']}/elements",
            params={"edit_token": board["edit_token"]},
            json={"kind": "video", "x": 0, "y": 0, "w": 5, "h": 10},
        )
        assert response.status_code == 422


class TestUploadsApi:

    @pytest.mark.asyncio
    async def test_upload_and_serve(self, test_client, sample_png_bytes):
        board = await _create_board(test_client)

        response = await test_client.post(
            f"{API}/{board['id']}/upload",
            params={"edit_token": board["edit_token"]},
            files={"file": ("photo.png", sample_png_bytes, "image/png")},
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["mime_type"] == "image/png"
        assert data["url"].startswith(f"http://backend.test/uploads/boards/{board['id']}/")

        served = await test_client.get(f"/uploads/boards/{board['id']}/{data['filename']}")
        assert served.status_code == 200
        assert served.content == sample_png_bytes

    @pytest.mark.asyncio
    async def test_file_exactly_at_size_limit_is_accepted(self, test_client, sample_png_bytes):
        board = await _create_board(test_client)

        with patch.object(settings, "max_upload_size", len(sample_png_bytes)):
            response = await test_client.post(
                f"{API}/{board['id']}/upload",
                params={"edit_token": board["edit_token"]},
                files={"file": ("photo.png", sample_png_bytes, "image/png")},
            )

        assert response.status_code == 201
        assert response.json()["data"]["size"] == len(sample_png_bytes)

    @pytest.mark.asyncio
    async def test_file_one_byte_over_limit_is_422(self, test_client, sample_png_bytes):
        board = await _create_board(test_client)

        with patch.object(settings, "max_upload_size", len(sample_png_bytes) - 1):
            response = await test_client.post(
                f"{API}/{board['id']}/upload",
                params={"edit_token": board["edit_token"]},
                files={"file": ("photo.png", sample_png_bytes, "image/png")},
            )

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_upload_without_token_is_401(self, test_client, sample_png_bytes):
        board = await _create_board(test_client)
        response = await test_client.post(
            f"{API}/{board['id']}/upload",
            files={"file": ("photo.png", sample_png_bytes, "image/png")},
        )
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_upload_of_non_image_is_422(self, test_client):
        board = await _create_board(test_client)
        response = await test_client.post(
            f"{API}/{board['id']}/upload",
            params={"edit_token": board["edit_token"]},
            files={"file": ("notes.png", b"plain text", "image/png")},
        )
        assert response.status_code == 422


class TestRecapApi:

    @pytest.mark.asyncio
    async def test_month_recap(self, test_client):
        board = await _create_board(test_client)
        page = await _create_page(test_client, board, "January", date="2024-01-20T10:00:00Z")
        await _create_page(test_client, board, "February", date="2024-02-02T10:00:00Z")
        await _create_element(test_client, board, page)

        response = await test_client.get(
            f"{API}/{board['id']}/recap", params={"filter": "month", "date": "2024-01-05"},
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["filter"] == "month"
        assert [p["title"] for p in data["pages"]] == ["January"]
        assert data["element_count"] == 1
