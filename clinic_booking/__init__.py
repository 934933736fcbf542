"""
Clinic Booking System

A FastAPI-based appointment booking backend: a generated slot calendar,
signed patient/admin sessions, and a reservation engine that never lets two
confirmed bookings hold the same slot.
"""

__version__ = "1.0.0"
