"""Simulated MIPS processor, MMU, disk, timer and interrupt hardware, with
the small data structures a teaching kernel needs."""

__version__ = "0.1.0"