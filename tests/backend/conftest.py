import json
import os
import uuid

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from tortoise import Tortoise

from app.core import db as db_module
from app.core.errors import DependencyError
from app.core.security import hash_password
from app.main import app
from app.models.genre import Genre
from app.models.user import User
from app.services.media_base import AssetRef, MediaStore
from app.services.media_factory import get_media_store


TEST_DB_URL = "sqlite://:memory:?cache=shared"
os.environ["DATABASE_URL"] = TEST_DB_URL
db_module.DB_URL = TEST_DB_URL
db_module.TORTOISE_ORM["connections"]["default"] = TEST_DB_URL

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64
GLB_BYTES = b"glTF" + b"\x00" * 128


class FakeMediaStore(MediaStore):
    """
    In-memory media store. Records every upload/delete and can be told to
    fail deletions for a given kind.
    """

    def __init__(self):
        self.assets: dict[str, tuple[str, bytes]] = {}
        self.deleted: list[tuple[str, str]] = []
        self.fail_delete_kinds: set[str] = set()

    @property
    def name(self) -> str:
        return "Fake"

    def is_available(self) -> bool:
        return True

    async def upload(self, content, original_name, kind):
        file_name = f"{kind}/{uuid.uuid4()}_{original_name}"
        self.assets[file_name] = (kind, content)
        return AssetRef(
            file_name=file_name,
            file_path=f"https://media.test/{file_name}",
            file_type=original_name.rsplit(".", 1)[-1].lower(),
            file_size=len(content),
        )

    async def delete(self, file_name, kind):
        if kind in self.fail_delete_kinds:
            raise DependencyError(f"Error deleting {kind} from {self.name}")
        self.deleted.append((file_name, kind))
        self.assets.pop(file_name, None)


async def _init_test_db() -> None:
    """
    Initialize a clean in-memory SQLite database for every test.
    Ensures tables are recreated from scratch.
    """
    if Tortoise._inited:
        await Tortoise.close_connections()
    await Tortoise.init(config=db_module.TORTOISE_ORM)
    await Tortoise.generate_schemas()


@pytest.fixture
def media_store():
    store = FakeMediaStore()
    app.dependency_overrides[get_media_store] = lambda: store
    yield store
    app.dependency_overrides.pop(get_media_store, None)


@pytest_asyncio.fixture
async def client(media_store):
    """
    Provide an HTTPX AsyncClient bound to the FastAPI app with a fresh DB
    and the fake media store installed.
    """
    await _init_test_db()
    # Use ASGITransport without lifespan parameter (not supported in all httpx versions)
    try:
        transport = ASGITransport(app=app, lifespan="off")
    except TypeError:
        # Fallback for httpx versions that don't support lifespan parameter
        transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        yield async_client
    await Tortoise.close_connections()


@pytest_asyncio.fixture
async def create_user(client):
    """
    Factory fixture to create users directly via ORM.
    """

    async def _create_user(
        password: str = "UserPass!23",
        is_artist: bool = False,
        tokens: int = 0,
        username: str | None = None,
    ) -> tuple[User, str]:
        tag = uuid.uuid4().hex[:6]
        user = await User.create(
            first_name="Test",
            last_name="User",
            username=username or f"user_{tag}",
            email=f"{tag}@example.com",
            password_hash=hash_password(password),
            is_artist=is_artist,
            tokens=tokens,
        )
        return user, password

    return _create_user


@pytest_asyncio.fixture
async def create_artist(create_user):
    """
    Factory fixture to create artist accounts.
    """

    async def _create_artist(password: str = "ArtistPass!23", **kwargs) -> tuple[User, str]:
        return await create_user(password=password, is_artist=True, **kwargs)

    return _create_artist


@pytest_asyncio.fixture
async def genre(client):
    return await Genre.create(name="Sculpture")


@pytest_asyncio.fixture
async def auth_header_factory(client):
    """
    Helper fixture to obtain Authorization headers via the login endpoint.
    """

    async def _get_headers(user: User, password: str) -> dict[str, str]:
        resp = await client.post(
            "/api/v1/users/login",
            json={"email": user.email, "password": password},
        )
        assert resp.status_code == 200, resp.text
        token = resp.json()["data"]["token"]
        return {"Authorization": f"Bearer {token}"}

    return _get_headers


@pytest_asyncio.fixture
async def artist_headers(create_artist, auth_header_factory):
    artist, password = await create_artist()
    return artist, await auth_header_factory(artist, password)


@pytest_asyncio.fixture
async def buyer_headers(create_user, auth_header_factory):
    buyer, password = await create_user(tokens=1000)
    return buyer, await auth_header_factory(buyer, password)


@pytest_asyncio.fixture
async def upload_object(client):
    """
    Helper fixture: upload a .glb object through the API.
    """

    async def _upload(headers, title="Vase", filename="vase.glb"):
        return await client.post(
            "/api/v1/objects",
            headers=headers,
            data={"object": json.dumps({"title": title, "description": "A clay vase"})},
            files={"file": (filename, GLB_BYTES, "model/gltf-binary")},
        )

    return _upload


@pytest_asyncio.fixture
async def create_collection(client):
    """
    Helper fixture: create a collection through the API (multipart JSON + cover).
    """

    async def _create(headers, genre_ids=(), **overrides):
        payload = {
            "type": "exposition",
            "title": "Spring Show",
            "description": "Works of spring",
            "city": "Ghent",
            "price": 500,
            "genres": [str(g) for g in genre_ids],
        }
        payload.update(overrides)
        return await client.post(
            "/api/v1/artist/collections",
            headers=headers,
            data={"collection": json.dumps(payload)},
            files={"coverImage": ("cover.png", PNG_BYTES, "image/png")},
        )

    return _create
