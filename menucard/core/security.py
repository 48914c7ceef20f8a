import secrets

def gen_code(n: int = 6) -> str:
    # numeric code, easy for email input; leading zeros are kept
    return "".join(secrets.choice("0123456789") for _ in range(n))

def gen_session_token(nbytes: int = 32) -> str:
    # URL-safe opaque token, 256 bits by default
    return secrets.token_urlsafe(nbytes)
