"""
Club Kernel - membership rules core

Domain values, calendar-date handling, and infrastructure for the club's
billing and Life-eligibility engine:
- Typed member and rate-settings records validated at the boundary
- Local calendar-date parsing (no timestamps for calendar dates)
- Injectable clock for deterministic billing runs
- Structured JSON logging
"""

__version__ = "0.1.0"
