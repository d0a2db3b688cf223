"""Reactive per host-pair path forwarding for Ryu."""

__version__ = '0.1.0'
