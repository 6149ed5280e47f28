"""
Budget Calculator - Prorated Budget Totals Over Arbitrary Date Ranges.

Sums the share of each monthly budget allocation that falls inside a
query period, assuming every monthly amount accrues uniformly per day.

Version: 0.1.0
"""

__version__ = "0.1.0"
__author__ = "Budget Calculator Team"
