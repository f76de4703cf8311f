"""
Accounts Module
===============

Bounded Context for campus users and their credentials.

Responsibilities:
- Register users with bcrypt-hashed passwords
- Verify credentials and issue JWT access tokens
- Resolve the authenticated user for every protected endpoint
"""

__version__ = "1.0.0"
