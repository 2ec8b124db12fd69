"""Multicore CPU and operating-system scheduling simulator with caches and paging."""

__version__ = "0.1.0"