"""
Insurance card pre-check engine.

Reads the front and back of an insurance card via OCR and decides whether the
plan carries out-of-network benefits (booking) or not (self-pay).
"""

__version__ = "1.0.0"
