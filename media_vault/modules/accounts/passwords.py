"""bcrypt password hashing with a configurable work factor."""

from __future__ import annotations

from dataclasses import dataclass

import bcrypt


@dataclass(slots=True, frozen=True)
class PasswordHasher:
    rounds: int = 12

    def hash(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        # Malformed stored hashes count as a mismatch.
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except ValueError:
            return False


__all__ = ["PasswordHasher"]
