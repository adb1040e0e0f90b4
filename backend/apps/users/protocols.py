from __future__ import annotations

from typing import Optional, Protocol, TYPE_CHECKING

if TYPE_CHECKING:
    from apps.users.models import User


class UserRepositoryProtocol(Protocol):
    def get(self, **filters) -> Optional["User"]: ...

    def get_by_email(self, email: str) -> Optional["User"]: ...

    def email_taken(self, email: str) -> bool: ...

    def username_taken(self, username: str) -> bool: ...

    def create_user(self, **data) -> "User": ...
