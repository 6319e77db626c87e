import pytest

from app.core.bootstrap import ensure_default_genres
from app.models import Genre


pytestmark = pytest.mark.asyncio


async def test_create_stores_canonical_name(client, buyer_headers):
    _, headers = buyer_headers
    resp = await client.post("/api/v1/genres", json={"name": "rock-n-roll"}, headers=headers)
    assert resp.status_code == 201
    assert resp.json()["data"]["genre"]["name"] == "Rock-N-Roll"


async def test_case_insensitive_duplicates(client, buyer_headers):
    _, headers = buyer_headers
    await client.post("/api/v1/genres", json={"name": "rock-n-roll"}, headers=headers)
    dup = await client.post("/api/v1/genres", json={"name": "Rock-N-Roll"}, headers=headers)
    assert dup.status_code == 409
    assert await Genre.all().count() == 1


@pytest.mark.parametrize("name", ["", "jazz & blues", "x" * 36])
async def test_invalid_names(client, buyer_headers, name):
    _, headers = buyer_headers
    resp = await client.post("/api/v1/genres", json={"name": name}, headers=headers)
    assert resp.status_code == 400


async def test_list_show_rename_delete(client, buyer_headers, genre):
    _, headers = buyer_headers

    listed = await client.get("/api/v1/genres", headers=headers)
    assert listed.status_code == 200
    assert [g["name"] for g in listed.json()["data"]["genres"]] == ["Sculpture"]

    shown = await client.get(f"/api/v1/genres/{genre.id}", headers=headers)
    assert shown.json()["data"]["genre"]["id"] == str(genre.id)

    renamed = await client.put(f"/api/v1/genres/{genre.id}", json={"name": "land art"}, headers=headers)
    assert renamed.status_code == 200
    assert renamed.json()["data"]["genre"]["name"] == "Land Art"

    deleted = await client.delete(f"/api/v1/genres/{genre.id}", headers=headers)
    assert deleted.status_code == 200
    assert await Genre.filter(id=genre.id).count() == 0

    empty = await client.get("/api/v1/genres", headers=headers)
    assert empty.status_code == 204


async def test_rename_to_existing_name_conflicts(client, buyer_headers, genre):
    _, headers = buyer_headers
    other = await Genre.create(name="Painting")
    resp = await client.put(f"/api/v1/genres/{other.id}", json={"name": "SCULPTURE"}, headers=headers)
    assert resp.status_code == 409


async def test_unknown_genre_is_404(client, buyer_headers):
    _, headers = buyer_headers
    assert (await client.get("/api/v1/genres/not-a-uuid", headers=headers)).status_code == 404
    assert (
        await client.get("/api/v1/genres/00000000-0000-0000-0000-000000000000", headers=headers)
    ).status_code == 404


async def test_seed_genres_is_idempotent(client):
    created = await ensure_default_genres(["painting", "street art", "bad!name", "rock\tpop"])
    assert sorted(g.name for g in created) == ["Painting", "Street Art"]
    again = await ensure_default_genres(["Painting", "STREET ART"])
    assert again == []
    assert await Genre.all().count() == 2
