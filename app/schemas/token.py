# app/schemas/token.py
from pydantic import BaseModel


class TokenPayload(BaseModel):
    sub: str  # "sub" is the auth user id; suppliers are looked up by it
    exp: int  # Standard claim for expiration time

    model_config = {
        "populate_by_name": True,
        "from_attributes": True,
    }
