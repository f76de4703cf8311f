"""
Infrastructure Layer
=====================

Low-level technical concerns shared by every module:
- Database connection management
- Password hashing and access tokens
"""
