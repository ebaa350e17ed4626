# thethought/users/deps.py
"""
Dependencias de autenticación compartidas por todos los routers.

El token llega por `?token=...` o por `Authorization: Bearer XXX`.
"""
from fastapi import Depends, Header, HTTPException, Query
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from thethought.core.security import decode_access_token
from thethought.db.session import get_session
from thethought.users.models import User


def _extract_token(token: str | None, authorization: str | None) -> str | None:
    if not token and authorization and authorization.lower().startswith("bearer "):
        token = authorization.split(" ", 1)[1]
    return token or None


async def _user_from_token(db: AsyncSession, token: str) -> User:
    try:
        user_id = int(decode_access_token(token))
    except (JWTError, ValueError):
        raise HTTPException(status_code=401, detail="invalid token")

    user = await db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=401, detail="user not found")
    return user


async def get_current_user(
    db: AsyncSession = Depends(get_session),
    token: str | None = Query(None),
    authorization: str | None = Header(None),
) -> User:
    tok = _extract_token(token, authorization)
    if not tok:
        raise HTTPException(status_code=401, detail="missing token")
    return await _user_from_token(db, tok)


async def get_optional_user(
    db: AsyncSession = Depends(get_session),
    token: str | None = Query(None),
    authorization: str | None = Header(None),
) -> User | None:
    """
    Igual que get_current_user, pero sin token → anónimo (None).
    Un token presente pero inválido sigue siendo 401.
    """
    tok = _extract_token(token, authorization)
    if not tok:
        return None
    return await _user_from_token(db, tok)
