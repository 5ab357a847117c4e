"""
Password Hasher Implementation
bcrypt with a configurable work factor
"""
import bcrypt

from core.config import settings
from application.services.auth.interfaces import IPasswordHasher


class BcryptPasswordHasher(IPasswordHasher):
    """bcrypt password hasher"""

    def __init__(self, rounds: int = None):
        self.rounds = rounds or settings.BCRYPT_ROUNDS

    def hash_password(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        if not hashed_password:
            return False
        try:
            return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
        except ValueError:
            # Stored value is not a bcrypt hash
            return False
