from starlette.testclient import TestClient

from repair_cafe.core.config import settings
from repair_cafe.models.user import User
from repair_cafe.services.auth_service import create_session_token


def login(client: TestClient, db_user: User) -> None:
    """Attaches a valid session cookie for the given user to the client."""
    client.cookies.set(settings.SESSION_COOKIE_NAME, create_session_token(db_user))


def logout(client: TestClient) -> None:
    client.cookies.clear()
