"""
models/bad_type.py
------------------
Row of the `BadType` table: a VARCHAR column mapped without an encoding override.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class BadType:
    """
    Attributes:
        id: Identity primary key (None for new records).
        some_varchar: Free text stored in a VARCHAR column.
    """
    id: Optional[int] = None
    some_varchar: Optional[str] = None
