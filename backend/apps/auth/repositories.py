from __future__ import annotations

from typing import Any

from apps.users.repositories import UserRepository

from .protocols import UserRegistrationRepositoryProtocol


class DjangoUserRegistrationRepository(UserRegistrationRepositoryProtocol):
    def __init__(self) -> None:
        self.users = UserRepository()

    def username_exists(self, username: str) -> bool:
        return self.users.username_taken(username)

    def email_exists(self, email: str) -> bool:
        return self.users.email_taken(email)

    def create_user(self, **data: Any):
        # The manager hashes the password and normalizes the email.
        return self.users.create_user(**data)
