from socialapp.models.refresh_token import RefreshToken
from socialapp.models.user import Role, User

__all__ = [
    "RefreshToken",
    "Role",
    "User",
]
