"""Background workers for the booking engine"""
from .hold_sweeper import HoldSweeperWorker

__all__ = ["HoldSweeperWorker"]
