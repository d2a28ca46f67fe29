"""Humanoid robot toolkit: points, INI settings, servo bus packets and a soccer behaviour."""

__version__ = "0.1.0"