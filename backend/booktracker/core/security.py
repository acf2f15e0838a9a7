from passlib.context import CryptContext
from booktracker.core.config import settings

# CryptContext handles password hashing using bcrypt
# bcrypt generates a salt per hash and stores it alongside the digest
# 'deprecated="auto"' lets passlib flag hashes made with older schemes
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against a hash using constant-time comparison"""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password using bcrypt"""
    return pwd_context.hash(password)


def dummy_verify() -> None:
    """Burn one hash check so unknown emails take as long as wrong passwords"""
    pwd_context.dummy_verify()
