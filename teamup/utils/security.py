from passlib.context import CryptContext

# Argon2 for new hashes; older schemes still verify and get upgraded on login
pwd_context = CryptContext(schemes=["argon2", "bcrypt"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def password_needs_rehash(hashed_password: str) -> bool:
    """True when the stored hash uses a deprecated scheme or weaker parameters."""
    return pwd_context.needs_update(hashed_password)
