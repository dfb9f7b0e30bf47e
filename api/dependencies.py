"""
Dependencias de FastAPI para base de datos y autenticación.

Este módulo proporciona dependencias reutilizables para:
- Obtener una sesión de base de datos por request
- Obtener el usuario actual desde el token JWT
"""

from typing import Optional, Generator
from fastapi import HTTPException, Header
from sqlalchemy.orm import Session

from recipe_ai_core.config import get_settings
from recipe_ai_core.db.database import get_db_engine

import logging
import jwt  # pyjwt

logger = logging.getLogger(__name__)


def get_db() -> Generator[Session, None, None]:
    """
    Dependencia de FastAPI para obtener una sesión de base de datos.
    Usa un generador puro (commit al final del request, rollback si falla).
    """
    get_db_engine(echo=False)
    from recipe_ai_core.db.database import SessionLocal
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def _decode_token(token: str) -> dict:
    settings = get_settings()
    if settings.jwt_secret:
        return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    # Sin secreto configurado (desarrollo local) solo se lee el payload
    logger.warning("JWT_SECRET no configurado: el token se decodifica sin verificar la firma")
    return jwt.decode(token, options={"verify_signature": False})


async def get_current_user_id(
    authorization: Optional[str] = Header(None, alias="Authorization"),
) -> str:
    """
    Obtiene el ID del usuario actual (claim `sub`) desde el token JWT.

    Args:
        authorization: Header Authorization con formato "Bearer <token>"

    Returns:
        ID del usuario

    Raises:
        HTTPException: 401 si falta el header o el token es inválido
    """
    if not authorization:
        logger.warning("Authorization header no presente")
        raise HTTPException(status_code=401, detail="Missing Authorization header")

    if not authorization.startswith("Bearer "):
        raise HTTPException(
            status_code=401,
            detail="Invalid Authorization header format. Expected 'Bearer <token>'",
        )

    token = authorization.replace("Bearer ", "", 1).strip()
    try:
        decoded = _decode_token(token)
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expirado")
    except jwt.InvalidTokenError as e:
        logger.error(f"Error decodificando JWT: {e}")
        raise HTTPException(status_code=401, detail=f"Invalid token: {str(e)}")

    user_id = decoded.get("sub")
    if not user_id:
        logger.warning(f"Token no contiene 'sub'. Campos: {list(decoded.keys())}")
        raise HTTPException(status_code=401, detail="Invalid token: no user ID found")

    return str(user_id)
