#!/usr/bin/env python3
"""
Sample Python module for exercising the repository map.
"""

import os
from typing import List, Dict, Optional
from dataclasses import dataclass

MAX_USERS = 100
_CACHE_TTL = 30


@dataclass
class User:
    name: str
    email: str
    age: Optional[int] = None


class UserManager:
    """Manages user operations."""

    def __init__(self):
        self.users: List[User] = []
        self._index = {}

    def add_user(self, user: User) -> None:
        """Add a user to the manager."""
        self.users.append(user)
        self._index[user.email] = user

    def get_user(self, email: str) -> Optional[User]:
        """Get user by email."""
        for user in self.users:
            if user.email == email:
                return user
        return None

    @staticmethod
    def validate_email(email: str) -> bool:
        return "@" in email


def create_user(name: str, email: str, age: int = None) -> User:
    """Create a new user instance."""
    return User(name=name, email=email, age=age)


def iter_users(manager: UserManager):
    for user in manager.users:
        yield user


def _load_env() -> Dict[str, str]:
    return {"home": os.environ.get("HOME", "")}


def main():
    """Main function."""
    manager = UserManager()
    user = create_user("John Doe", "john@example.com", 30)
    manager.add_user(user)
    print(f"Created user: {user.name}")


if __name__ == "__main__":
    main()
