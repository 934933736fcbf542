"""
Test suite for the Clinic Booking System.

Contains unit and integration tests for the application's functionality.
"""
import os

# Set environment for testing
os.environ["TESTING"] = "1"
# Cheap hashes keep the suite fast
os.environ.setdefault("BCRYPT_ROUNDS", "4")
