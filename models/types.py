# models/types.py

"""
Holds TypeVar definition for simplifying type checks.
"""

from typing import TypeVar

from .marks_entry import MarksEntry
from .subject import Subject

RecordType = TypeVar("RecordType", MarksEntry, Subject)
