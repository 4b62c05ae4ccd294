"""Batch uploader of archived SMA inverter readings to PVOutput."""

__version__ = "0.1.0"