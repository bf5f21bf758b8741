# dependencies.py
"""
Shared FastAPI dependencies.

Authentication itself happens upstream; this module only decodes the bearer
token and exposes the operator id that mutating operations record.
"""
import os

from fastapi import HTTPException, Request, status
from jose import JWTError, jwt
from dotenv import load_dotenv

load_dotenv()
SECRET_KEY = os.getenv("JWT_SECRET")
ALGORITHM = "HS256"


# Token Auth Dependency
def verify_token(request: Request) -> dict:
     auth = request.headers.get("Authorization")
     if not auth or not auth.startswith("Bearer "):
          raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing token")
     token = auth.split(" ")[1]
     try:
          payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
          return payload
     except JWTError:
          raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid token")


def get_operator_id(request: Request) -> str:
     """Operator id from the token's 'id' (or 'sub') claim; must be non-empty."""
     payload = verify_token(request)
     operator_id = payload.get("id") or payload.get("sub")
     if operator_id is None or not str(operator_id).strip():
          raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Token carries no operator id")
     return str(operator_id)
