from __future__ import annotations

from typing import Any, Optional, Protocol


class UserRegistrationRepositoryProtocol(Protocol):
    def username_exists(self, username: str) -> bool: ...

    def email_exists(self, email: str) -> bool: ...

    def create_user(self, **data: Any): ...


class CredentialCheckerProtocol(Protocol):
    def __call__(self, request: Any, *, username: str, password: str) -> Optional[Any]: ...
