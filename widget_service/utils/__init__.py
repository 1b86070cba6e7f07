"""
Generic utility functions shared across modules.

Currently holds logging setup used by the entry points in actions/.
"""
