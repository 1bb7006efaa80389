"""Booking availability and conflict-resolution service for Guidebook."""
