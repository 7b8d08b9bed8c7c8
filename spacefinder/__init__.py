"""
spacefinder - workspace availability for a coworking back-office.
"""

__version__ = "0.1.0"
