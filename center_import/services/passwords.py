from __future__ import annotations

import bcrypt

from ..models.config_models import DEFAULT_PASSWORD_ROUNDS

"""One-way password hashing for imported student accounts (bcrypt)."""


class PasswordHasher:
    def __init__(self, rounds: int = DEFAULT_PASSWORD_ROUNDS) -> None:
        self.rounds = rounds

    def hash(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("ascii")

    def verify(self, password: str, hashed: str) -> bool:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("ascii"))
