"""
Retail Bank Simulator

An in-memory retail bank: clients, accounts and annuity loans advanced one
simulated month at a time, with all money math in Decimal.
"""

__version__ = "1.0.0"
