"""
nextbus - answers "when is the next bus?" from a fixed weekly timetable.
"""

__version__ = "0.1.0"
