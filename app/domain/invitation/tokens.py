"""
초대 토큰

원문 토큰은 이메일로 한 번만 전달하고, DB에는 서버 비밀키로 만든
HMAC-SHA256 해시만 저장한다.
"""

import hashlib
import hmac
import secrets

from app.core.config import settings

TOKEN_BYTES = 32


def generate_token() -> str:
    """32바이트 난수 토큰 (64자리 hex)"""
    return secrets.token_hex(TOKEN_BYTES)


def hash_token(token: str, secret: str | None = None) -> str:
    key = settings.invitation_token_secret if secret is None else secret
    return hmac.new(key.encode(), token.encode(), hashlib.sha256).hexdigest()


def verify_token(token: str, stored_hash: str, secret: str | None = None) -> bool:
    """원문 토큰의 해시가 저장된 해시와 같은지 상수 시간 비교"""
    if not token or not stored_hash:
        return False
    return hmac.compare_digest(hash_token(token, secret), stored_hash)
