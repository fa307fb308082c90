# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
goblin: Go source -> JSON IR for external analysis tools.
"""

__version__ = "0.3.0"
