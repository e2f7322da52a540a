import json
import logging
import time
from datetime import datetime, timedelta
from typing import Any, Dict, Optional
from uuid import UUID
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import jwe
from jose.constants import ALGORITHMS
from jose.exceptions import JOSEError
from config.setting import settings
import error
from util.gen import derive_key_from_string
from service.redis import Redis

logger = logging.getLogger(__name__)

bearerschema = HTTPBearer()

TOKEN_CACHE_SECONDS = 300


def json_default_serializer(obj):
    """
    Custom JSON serializer for objects not serializable by default json code.
    Specifically handles UUID and datetime objects.
    """
    if isinstance(obj, UUID):
        return str(obj)
    if isinstance(obj, datetime):
        return obj.isoformat()
    raise TypeError(f"Object of type {obj.__class__.__name__} is not JSON serializable")


class TokenManager:
    @staticmethod
    def create_access_token(
        data: Dict[str, Any], expires_in_minutes: Optional[int] = None
    ) -> str:
        """
        Create an encrypted (JWE) access token
        """
        payload = data.copy()
        minutes = expires_in_minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES
        expiration_dt = datetime.now() + timedelta(minutes=minutes)
        payload.update({"exp": int(expiration_dt.timestamp())})
        payload_bytes = json.dumps(payload, default=json_default_serializer).encode(
            "utf-8"
        )
        key_value = derive_key_from_string(settings.SECRET_KEY, 16)
        try:
            encrypted_jwe_bytes = jwe.encrypt(
                plaintext=payload_bytes,
                key=key_value,
                algorithm=ALGORITHMS.A128KW,
                encryption=ALGORITHMS.A128CBC_HS256,
            )
        except JOSEError as e:
            logger.error(f"Encryption failed: {e}")
            raise error.ServerError("Login failed")

        return encrypted_jwe_bytes.decode("utf-8")

    @staticmethod
    def decode_token(token: str, check_expiry: bool = True) -> Dict[str, Any]:
        """
        Decrypts a JWE compact token string and returns the original Python dictionary.
        Optionally checks the 'exp' field against the current time.
        """
        try:
            key_value = derive_key_from_string(settings.SECRET_KEY, 16)
            decrypted_bytes = jwe.decrypt(token, key_value)
            decrypted_data = json.loads(decrypted_bytes.decode("utf-8"))
        except (JOSEError, ValueError, AttributeError) as e:
            logger.warning(f"Decryption failed or token tampered: {e}")
            raise error.AuthenticationError("Invalid token")

        if check_expiry and "exp" in decrypted_data:
            if int(time.time()) > decrypted_data["exp"]:
                raise error.AuthenticationError("Token expired")

        return decrypted_data


def verify_access_token(
    token: HTTPAuthorizationCredentials = Depends(bearerschema),
) -> Dict[str, Any]:
    """
    Verify the access token and return the payload with caching
    """
    token_string = token.credentials

    # Create cache key from token (using hash for security)
    cache_key = f"token_payload:{hash(token_string)}"

    redis_instance = Redis()
    cached_payload = redis_instance.get_json(cache_key)
    if cached_payload and cached_payload.get("exp", 0) >= int(time.time()):
        return cached_payload

    payload = TokenManager.decode_token(token_string)
    if "user_id" not in payload:
        raise error.AuthenticationError("Invalid token")

    # Cache the payload for a short while (shorter than token expiry)
    redis_instance.set_json(cache_key, payload, expiry=TOKEN_CACHE_SECONDS)

    return payload
