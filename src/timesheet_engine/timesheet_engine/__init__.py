"""Timesheet Engine package.

Turns raw clock punches into daily values, monthly flextime balances and
vacation balances. Organized by feature modules (bookings, daily, monthly,
vacation, ...) with pure calculation stages and thin service/repository layers.
"""
