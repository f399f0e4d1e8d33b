import os

# 设置测试环境 (before the app reads its settings)
os.environ["APP_ENV"] = "test"
os.environ.pop("DATABASE_URL", None)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from app.core.config import SQLITE_TEST_DB, get_settings
from app.db.database import Base, get_session, create_tables
from app.main import app
from app.repositories.user import UserRepository
from app.services.user import UserService

# 测试数据库配置
test_engine = create_engine(SQLITE_TEST_DB, connect_args={"check_same_thread": False})
TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

ADMIN_MAIL_ADDRESS = "admin@example.com"
ADMIN_PASSWORD = "adminpassword123"


@pytest.fixture(autouse=True)
def clean_db():
    """清理并重建测试数据库"""
    get_settings.cache_clear()
    Base.metadata.drop_all(bind=test_engine)
    create_tables(test_engine)
    yield
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def session_maker(clean_db):
    return TestSessionLocal


@pytest.fixture
def session(clean_db):
    """A session on the test database, rolled back and closed afterwards"""
    test_session = TestSessionLocal()
    yield test_session
    test_session.rollback()
    test_session.close()


@pytest.fixture
def client(clean_db):
    """创建测试客户端"""
    # 创建测试会话
    test_session = TestSessionLocal()

    # 覆盖依赖
    def override_get_session():
        try:
            yield test_session
        finally:
            test_session.close()

    app.dependency_overrides[get_session] = override_get_session

    client = TestClient(app)
    yield client

    # 测试结束后清理
    test_session.close()
    app.dependency_overrides.clear()


@pytest.fixture
def admin_user(clean_db):
    """An admin user stored directly through the service"""
    db = TestSessionLocal()
    try:
        user = UserService(UserRepository(db)).store_user(ADMIN_MAIL_ADDRESS, ADMIN_PASSWORD)
        db.commit()
        db.refresh(user)
        db.expunge(user)
    finally:
        db.close()
    return user


@pytest.fixture
def admin_token(client, admin_user):
    login_response = client.post("/api/v1/login", json={
        "mail_address": ADMIN_MAIL_ADDRESS,
        "password": ADMIN_PASSWORD,
    })
    assert login_response.status_code == 200
    # keep ``client`` anonymous
    client.cookies.clear()
    return login_response.json()["access_token"]


@pytest.fixture
def authenticated_client(client, admin_token):
    """返回一个已认证的客户端"""
    auth_client = TestClient(client.app)
    auth_client.headers = {"Authorization": f"Bearer {admin_token}"}
    return auth_client
