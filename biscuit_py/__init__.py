"""
Biscuit - point-in-time snapshots of the packages installed on a system.

Record what was installed, and when, so it can be compared or rebuilt later.
"""

from importlib.metadata import version as _version

__version__ = _version("biscuit-snapshot")
