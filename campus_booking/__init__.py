"""
Campus Booking
==============

Campus resource booking service (FastAPI modular monolith).
"""

__version__ = "1.0.0"
