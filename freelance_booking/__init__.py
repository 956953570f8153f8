"""Booking lifecycle and calendar conflict service for the freelancer marketplace."""

__version__ = "0.1.0"
