"""Shared fixtures: in-memory database, HTTP client and factories"""

import os

os.environ["SECRET_KEY"] = "test-secret-key-not-for-production"
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["ADMIN_NOTIFICATION_EMAIL"] = "ops@bookstore.test"

from decimal import Decimal
from typing import List, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.pool import StaticPool

from app.main import app
from app.core.database import build_engine, build_session_factory, get_db
from app.core.security import SecurityUtils
from app.models import Base, Product, User, UserRole
from app.utils.dependencies import get_email_service, get_storage_service

class FakeEmailService:
    """Records sends instead of talking to SMTP"""

    def __init__(self):
        self.sent: List[dict] = []
        self.fail = False
        self.raise_error = False

    async def send_email(self, to_email: str, subject: str, body: str, html_body: Optional[str] = None) -> bool:
        if self.raise_error:
            raise RuntimeError("SMTP connection refused")
        if self.fail:
            return False
        self.sent.append({"to": to_email, "subject": subject, "body": body, "html_body": html_body})
        return True

class FakeStorageService:
    def __init__(self):
        self.uploads: List[dict] = []
        self.deleted: List[str] = []

    async def upload_image(self, file_path: str, folder: str, public_id: Optional[str] = None) -> dict:
        with open(file_path, "rb") as fh:
            size = len(fh.read())
        self.uploads.append({"file_path": file_path, "folder": folder, "public_id": public_id, "size": size})
        return {"url": f"https://cdn.test/{folder}/{public_id}.png", "public_id": public_id}

    async def delete_image(self, public_id: str) -> bool:
        self.deleted.append(public_id)
        return True

@pytest_asyncio.fixture
async def engine():
    engine = build_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()

@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)

@pytest_asyncio.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session

@pytest.fixture
def fake_email():
    return FakeEmailService()

@pytest.fixture
def fake_storage():
    return FakeStorageService()

@pytest_asyncio.fixture
async def client(session_factory, fake_email, fake_storage):
    async def override_get_db():
        async with session_factory() as db:
            try:
                yield db
                await db.commit()
            except Exception:
                await db.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_email_service] = lambda: fake_email
    app.dependency_overrides[get_storage_service] = lambda: fake_storage

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()

@pytest.fixture
def make_user(session):
    async def _make_user(email: str = "reader@example.com", name: str = "Reader",
                         password: Optional[str] = "secret123", role: UserRole = UserRole.USER) -> User:
        user = User(
            name=name,
            email=email,
            password_hash=SecurityUtils.hash_password(password) if password else None,
            role=role,
        )
        session.add(user)
        await session.commit()
        return user
    return _make_user

@pytest.fixture
def make_product(session):
    async def _make_product(name: str = "Book", price: str = "500.00", availability: bool = True,
                            category: str = "Fiction", author: str = "Author",
                               description: str = "A good book", **kwargs) -> Product:
        product = Product(
            name=name,
            description=description,
            price=Decimal(price),
            availability=availability,
            category=category,
            author=author,
            **kwargs
        )
        session.add(product)
        await session.commit()
        return product
    return _make_product

def auth_headers(user: User) -> dict:
    role = user.role.value if isinstance(user.role, UserRole) else user.role
    token = SecurityUtils.create_access_token({"sub": user.id, "email": user.email, "role": role})
    return {"Authorization": f"Bearer {token}"}

@pytest_asyncio.fixture
async def user(make_user):
    return await make_user()

@pytest_asyncio.fixture
async def admin(make_user):
    return await make_user(email="admin@example.com", name="Admin", role=UserRole.ADMIN)

@pytest.fixture
def user_headers(user):
    return auth_headers(user)

@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin)
