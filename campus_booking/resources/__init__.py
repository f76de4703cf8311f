"""
Resources Module
================

Bounded Context for bookable campus resources (rooms, halls, equipment).

Responsibilities:
- Create, update, cancel, restore and delete resources
- Keep bookings consistent when a resource is cancelled or deleted
- Search, filter and sort resources together with their bookings
"""

__version__ = "1.0.0"
