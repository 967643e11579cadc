from jose import jwt
from app.config import settings

# Tokens are issued by the identity provider sharing SECRET_KEY; this app only verifies them.
ALGORITHM = "HS256"

def decode_token(token: str) -> dict:
    return jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
