"""Password hashing with bcrypt"""

from functools import cached_property

import bcrypt

BCRYPT_ROUNDS = 10
# bcrypt only looks at the first 72 bytes and newer releases reject longer input
MAX_PASSWORD_BYTES = 72


class PasswordHasher:
    """Salted bcrypt hashes stored as utf-8 strings"""

    def __init__(self, rounds: int = BCRYPT_ROUNDS):
        self.rounds = rounds

    def hash(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except ValueError:
            # Malformed stored hash, or a password bcrypt refuses (over 72 bytes)
            return False

    @cached_property
    def dummy_hash(self) -> str:
        """Hash at this cost to verify against when no account matches"""
        return self.hash("unknown-account")
