"""SereneMind: a small anger log and breathing companion."""

__version__ = "0.1.0"
