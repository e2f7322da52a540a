import hashlib
from functools import lru_cache


@lru_cache(maxsize=8)
def derive_key_from_string(secret_string: str, key_length: int) -> bytes:
    """
    Derives a cryptographically strong, fixed-length key from a text string
    using PBKDF2.

    Args:
        secret_string: The human-readable string (e.g., your SECRET_KEY).
        key_length: The desired length of the output key in bytes (e.g., 16 for 128-bit).

    Returns:
        A bytes object of the specified length.
    """
    # A fixed application salt keeps the derived key deterministic across restarts
    salt = "coursehub-app-salt".encode("utf-8")

    key_bytes = hashlib.pbkdf2_hmac(
        hash_name="sha256",
        password=secret_string.encode("utf-8"),
        salt=salt,
        iterations=480000,
        dklen=key_length,
    )

    return key_bytes
