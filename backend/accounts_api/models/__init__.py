from accounts_api.models.user import User

__all__ = ["User"]
