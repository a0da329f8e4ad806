"""
Scheduler Module - Black Box Interface

Purpose: Re-run dynamic registration periodically
Interface: RefreshScheduler.run(stop_event), RefreshScheduler.run_once()
Hidden: Timer handling, pass bookkeeping
"""

from .scheduler import DEFAULT_INTERVAL_SECONDS, RefreshScheduler

__all__ = ["DEFAULT_INTERVAL_SECONDS", "RefreshScheduler"]
