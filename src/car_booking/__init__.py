"""
Car Booking Package

Booking and price estimation service for wedding car rentals.
Prices a trip as base fare + distance, then applies discount, surcharge
and multiplier rules in order.
"""

__version__ = "1.0.0"
