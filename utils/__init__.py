"""
utils package
-------------

Contains utility modules used throughout the care home engine.

Includes helpers for loading configuration constants, logging, time arithmetic on shifts, and input validation.
"""
