"""Users feature module"""

from chronos.features.users.repository import UserRepository

__all__ = ["UserRepository"]
