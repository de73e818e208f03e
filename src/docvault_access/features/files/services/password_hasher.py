"""Salted one-way hashing for lock passwords."""

import bcrypt

from ....core.exceptions import ValidationError

# bcrypt only considers the first 72 bytes of input.
MAX_PASSWORD_BYTES = 72


class LockPasswordHasher:
    """bcrypt hashing and constant-time verification of lock passwords."""

    def __init__(self, rounds: int = 12, min_length: int = 1):
        self.rounds = rounds
        self.min_length = min_length

    def validate(self, password: str) -> bytes:
        if len(password) < self.min_length:
            raise ValidationError(
                f"Lock password must be at least {self.min_length} characters",
                field="password",
            )
        encoded = password.encode("utf-8")
        if len(encoded) > MAX_PASSWORD_BYTES:
            raise ValidationError(
                f"Lock password cannot exceed {MAX_PASSWORD_BYTES} bytes",
                field="password",
            )
        return encoded

    def hash(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(self.validate(password), salt).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        if not password or not password_hash:
            return False
        encoded = password.encode("utf-8")
        if len(encoded) > MAX_PASSWORD_BYTES:
            return False
        try:
            return bcrypt.checkpw(encoded, password_hash.encode("utf-8"))
        except ValueError:
            # Malformed stored hash.
            return False
