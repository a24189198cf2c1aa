"""
models/good_type.py
-------------------
Row of the `GoodType` table: same shape as BadType, but its text column is
mapped with an explicit narrow (VARCHAR) declaration.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class GoodType:
    id: Optional[int] = None
    some_nvarchar: Optional[str] = None
