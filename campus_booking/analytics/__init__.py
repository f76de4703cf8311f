"""
Analytics Module
================

Bounded Context for read-only booking usage reports.

Responsibilities:
- Count total and active bookings per resource
- Rank the most booked resources
"""

__version__ = "1.0.0"
