"""
Portfolio Kernel

The consistency core for project portfolio resourcing and spending:
- Currency-safe monetary arithmetic with fixed rounding
- Inclusive calendar-date interval algebra
- Append-only change-record queues owned by each aggregate
- Injected clocks for deterministic lifecycle rules
"""

__version__ = "0.1.0"
