import pytest

from app.models import ArtObject, Collection, User


pytestmark = pytest.mark.asyncio

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


async def test_me_returns_private_profile(client, buyer_headers):
    buyer, headers = buyer_headers
    resp = await client.get("/api/v1/users/me", headers=headers)
    assert resp.status_code == 200
    data = resp.json()["data"]["user"]
    assert data["id"] == str(buyer.id)
    assert data["tokens"] == 1000
    assert "passwordHash" not in data and "password_hash" not in data


async def test_list_users(client, buyer_headers, create_user):
    _, headers = buyer_headers
    await create_user()
    resp = await client.get("/api/v1/users", headers=headers)
    assert resp.status_code == 200
    assert len(resp.json()["data"]["users"]) == 2


async def test_update_me_and_conflicts(client, buyer_headers, create_user):
    _, headers = buyer_headers
    other, _ = await create_user()

    resp = await client.put("/api/v1/users/me", json={"firstName": "Grace"}, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["data"]["user"]["firstName"] == "Grace"

    taken = await client.put("/api/v1/users/me", json={"username": other.username}, headers=headers)
    assert taken.status_code == 409
    assert taken.json()["data"]["fields"] == ["username"]

    bad_email = await client.put("/api/v1/users/me", json={"email": "nope"}, headers=headers)
    assert bad_email.status_code == 400


async def test_make_artist(client, buyer_headers):
    buyer, headers = buyer_headers
    resp = await client.patch("/api/v1/users/me/make-artist", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["data"]["user"]["isArtist"] is True
    assert (await User.get(id=buyer.id)).is_artist is True


async def test_profile_picture_replacement_deletes_previous(client, buyer_headers, media_store):
    _, headers = buyer_headers
    first = await client.put(
        "/api/v1/users/me/profile-picture",
        headers=headers,
        files={"profilePicture": ("me.png", PNG, "image/png")},
    )
    assert first.status_code == 200
    first_ref = first.json()["data"]["user"]["profilePicture"]

    second = await client.put(
        "/api/v1/users/me/profile-picture",
        headers=headers,
        files={"profilePicture": ("me2.jpg", PNG, "image/jpeg")},
    )
    assert second.status_code == 200
    assert second.json()["data"]["user"]["profilePicture"]["fileName"] != first_ref["fileName"]
    assert (first_ref["fileName"], "profileImage") in media_store.deleted


async def test_profile_picture_rejects_wrong_type(client, buyer_headers):
    _, headers = buyer_headers
    resp = await client.put(
        "/api/v1/users/me/profile-picture",
        headers=headers,
        files={"profilePicture": ("me.gif", b"GIF89a", "image/gif")},
    )
    assert resp.status_code == 400


async def test_delete_me_cascades(client, artist_headers, upload_object, create_collection):
    artist, headers = artist_headers
    await upload_object(headers)
    await create_collection(headers)

    resp = await client.delete("/api/v1/users/me", headers=headers)
    assert resp.status_code == 200
    assert await User.filter(id=artist.id).count() == 0
    assert await Collection.filter(created_by_id=artist.id).count() == 0
    assert await ArtObject.filter(uploaded_by_id=artist.id).count() == 0


async def test_token_top_up(client, buyer_headers):
    buyer, headers = buyer_headers
    resp = await client.put("/api/v1/tokens", json={"tokenAmount": 250}, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["data"]["tokens"] == 1250
    assert (await User.get(id=buyer.id)).tokens == 1250


@pytest.mark.parametrize("body", [{}, {"tokenAmount": 0}, {"tokenAmount": -5}])
async def test_invalid_token_amounts(client, buyer_headers, body):
    _, headers = buyer_headers
    resp = await client.put("/api/v1/tokens", json=body, headers=headers)
    assert resp.status_code == 400


async def test_list_artists_with_collection_count(
    client, artist_headers, buyer_headers, create_collection
):
    artist, headers = artist_headers
    created = await create_collection(headers)
    cid = created.json()["data"]["collection"]["id"]
    await client.patch(f"/api/v1/artist/collections/{cid}/publish", headers=headers)
    await create_collection(headers, title="Draft")  # unpublished, not counted

    _, buyer = buyer_headers
    resp = await client.get("/api/v1/artists", headers=buyer)
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["totalCount"] == 1
    assert data["artists"][0]["id"] == str(artist.id)
    assert data["artists"][0]["collectionCount"] == 1
    assert data["currentPage"] == 1
    assert data["hasMore"] is False


async def test_show_artist(client, artist_headers, buyer_headers, create_collection):
    artist, headers = artist_headers
    created = await create_collection(headers)
    cid = created.json()["data"]["collection"]["id"]
    await client.patch(f"/api/v1/artist/collections/{cid}/publish", headers=headers)

    buyer, buyer_hdrs = buyer_headers
    await client.post(f"/api/v1/collections/{cid}/like", headers=buyer_hdrs)
    resp = await client.get(f"/api/v1/artists/{artist.id}", headers=buyer_hdrs)
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["collectionCount"] == 1
    assert data["totalLikes"] == 1
    assert data["collections"][0]["liked"] is True


async def test_non_artist_is_not_found(client, buyer_headers):
    buyer, headers = buyer_headers
    resp = await client.get(f"/api/v1/artists/{buyer.id}", headers=headers)
    assert resp.status_code == 404


async def test_no_artists_is_204(client, buyer_headers):
    _, headers = buyer_headers
    resp = await client.get("/api/v1/artists", headers=headers)
    assert resp.status_code == 204
