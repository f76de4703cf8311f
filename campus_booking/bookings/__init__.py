"""
Bookings Module
===============

Bounded Context for reserving campus resources.

Responsibilities:
- Validate requested slots against the booking policy
- Reject slots that overlap active bookings of the same resource
- Serialize concurrent booking attempts per resource
- Drive the booking lifecycle (booked -> cancelled | completed)
- Report free and booked windows of a resource for a day
- Hot-reload the booking policy file and complete past bookings in the background
"""

__version__ = "1.0.0"
