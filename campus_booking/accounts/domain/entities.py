"""
Accounts Domain Entities
========================
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class User:
    """A registered campus user."""

    id: Optional[int]
    name: str
    email: str
    password_hash: str

    def __post_init__(self):
        self.email = self.normalize_email(self.email)
        if not self.name.strip():
            raise ValueError("name cannot be blank")

    @staticmethod
    def normalize_email(email: str) -> str:
        """Emails are compared case-insensitively."""
        return email.strip().lower()
