"""
models/ - Domain Models
=======================
Plain dataclasses for the two demo tables. No behavior, no validation.
Both records keep the same shape so only their mapping tells them apart.
"""
