import pytest


pytestmark = pytest.mark.asyncio


async def _publish(client, headers, create_collection, **overrides):
    overrides.setdefault("description", "A show")
    resp = await create_collection(headers, **overrides)
    cid = resp.json()["data"]["collection"]["id"]
    await client.patch(f"/api/v1/artist/collections/{cid}/publish", headers=headers)
    return cid


async def test_query_is_required(client, buyer_headers):
    _, headers = buyer_headers
    assert (await client.get("/api/v1/search/collections", headers=headers)).status_code == 400
    assert (await client.get("/api/v1/search/artists?query=%20", headers=headers)).status_code == 400


async def test_collections_term_results_come_first(client, artist_headers, buyer_headers, create_collection):
    _, headers = artist_headers
    both = await _publish(client, headers, create_collection, title="Spring Ghent", city="Ghent")
    one = await _publish(client, headers, create_collection, title="Spring Paris", city="Paris")
    await _publish(client, headers, create_collection, title="Winter", city="Oslo")
    await create_collection(headers, title="Spring Draft", description="A show")  # unpublished

    _, buyer = buyer_headers
    resp = await client.get("/api/v1/search/collections?query=spring ghent", headers=buyer)
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert [c["id"] for c in data["collections"]] == [both, one]
    assert data["totalCount"] == 2
    assert data["hasMore"] is False


async def test_collections_substring_match(client, artist_headers, buyer_headers, create_collection):
    _, headers = artist_headers
    cid = await _publish(client, headers, create_collection, title="Sculptures")
    _, buyer = buyer_headers
    resp = await client.get("/api/v1/search/collections?query=ULPT", headers=buyer)
    assert [c["id"] for c in resp.json()["data"]["collections"]] == [cid]


async def test_collections_pagination(client, artist_headers, buyer_headers, create_collection):
    _, headers = artist_headers
    for i in range(3):
        await _publish(client, headers, create_collection, title=f"Light {i}")
    _, buyer = buyer_headers

    first = await client.get("/api/v1/search/collections?query=light&limit=2", headers=buyer)
    assert len(first.json()["data"]["collections"]) == 2
    assert first.json()["data"]["totalPages"] == 2
    last = await client.get("/api/v1/search/collections?query=light&limit=2&page=2", headers=buyer)
    assert len(last.json()["data"]["collections"]) == 1
    assert last.json()["data"]["hasMore"] is False
    empty = await client.get("/api/v1/search/collections?query=light&limit=2&page=3", headers=buyer)
    assert empty.status_code == 204


async def test_artists_search(client, create_artist, buyer_headers):
    artist, _ = await create_artist(username="marina_abramovic")
    await create_artist(username="someone_else")
    _, buyer = buyer_headers

    resp = await client.get("/api/v1/search/artists?query=marina", headers=buyer)
    assert resp.status_code == 200
    assert [a["id"] for a in resp.json()["data"]["artists"]] == [str(artist.id)]

    nothing = await client.get("/api/v1/search/artists?query=zzz", headers=buyer)
    assert nothing.status_code == 204
