"""
Utility functions module.

Time helpers shared across the system:
- Report timestamps are always UTC wall-clock time at calculation
- Price history dates are calendar days in UTC
- Lookback windows are expressed in calendar days
"""
