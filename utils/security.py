import bcrypt


def hash_password(password: str) -> str:
    """
    Hash a plaintext password with bcrypt

    Args:
        password: Plaintext password

    Returns:
        bcrypt hash as a string, salt included
    """
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt())
    return hashed.decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    """
    Check a plaintext password against a stored bcrypt hash

    Args:
        password: Plaintext password supplied by the client
        hashed: Stored bcrypt hash

    Returns:
        True if the password matches, False otherwise (including malformed hashes)
    """
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        return False
