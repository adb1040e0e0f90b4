from typing import Optional

from apps.common.repository import GenericRepository
from .models import User, normalize_login_email


class UserRepository(GenericRepository[User]):
    def __init__(self):
        super().__init__(User)

    def get_by_email(self, email: str) -> Optional[User]:
        normalized = normalize_login_email(email)
        if not normalized:
            return None
        return self.model.objects.filter(email__iexact=normalized).first()

    def email_taken(self, email: str) -> bool:
        return self.model.objects.filter(email__iexact=normalize_login_email(email)).exists()

    def username_taken(self, username: str) -> bool:
        return self.model.objects.filter(username__iexact=(username or "").strip()).exists()

    def create_user(self, **data) -> User:
        return self.model.objects.create_user(**data)
