from jose import jwt
from app.core.config import settings
from app.schemas.token import TokenPayload


def get_supplier_authentication_headers(auth_user_id: str = "auth_user_123") -> dict[str, str]:
    """
    Generates a valid JWT token and authentication headers for a test supplier login.
    """
    payload = TokenPayload(sub=auth_user_id, exp=9999999999)  # High expiration for tests
    token = jwt.encode(payload.model_dump(), settings.JWT_SECRET, algorithm="HS256")
    return {"Authorization": f"Bearer {token}"}


def get_internal_headers() -> dict[str, str]:
    return {"X-Internal-Api-Key": settings.INTERNAL_API_KEY}
