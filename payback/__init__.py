"""
Party Payback - Source Package

Tracks shared expenses among a group of friends and works out who
should pay whom to settle up.

DESIGN PRINCIPLES:
1. Validate at entry, trust afterwards
2. Settlement is a pure function of the current roster and expenses
3. No silent corrections
4. Every user action is logged
"""

__version__ = "1.0.0"
__author__ = "Party Payback Team"
