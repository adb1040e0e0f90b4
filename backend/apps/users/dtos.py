from dataclasses import dataclass
from typing import Optional

from .models import User


@dataclass
class UserDTO:
    id: int
    email: str
    username: str
    first_name: str
    last_name: str
    display_name: str
    phone: Optional[str]
    is_staff: bool
    date_joined: Optional[str]


def user_to_dto(u: User) -> UserDTO:
    joined = getattr(u, "date_joined", None)
    if joined is not None:
        joined = joined.isoformat()
    return UserDTO(
        id=u.id,
        email=u.email,
        username=u.username,
        first_name=u.first_name,
        last_name=u.last_name,
        display_name=u.display_name,
        phone=u.phone,
        is_staff=bool(u.is_staff or u.is_superuser),
        date_joined=joined,
    )
