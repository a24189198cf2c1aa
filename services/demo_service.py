"""
services/demo_service.py
------------------------
Runs the same equality filter against both demo tables, one after the other.
The results are not used; the point is the statement text each one sends.
"""

from typing import Protocol

from db.context import ImplicitConversionContext
from models.bad_type import BadType
from models.good_type import GoodType
from utils.logger import get_logger

logger = get_logger(__name__)

FILTER_VALUE = "Hello World"


class Runnable(Protocol):
    def run(self) -> None: ...


class Demo:
    """Compares the default (wide) mapping with the explicit narrow one."""

    def __init__(self, context: ImplicitConversionContext, filter_value: str = FILTER_VALUE):
        self.context = context
        self.filter_value = filter_value

    def run(self) -> None:
        print("Executing GetBadType")
        self.get_bad_type()

        print("Executing GetGoodType")
        self.get_good_type()

    def get_bad_type(self) -> list[BadType]:
        """VARCHAR column mapped by default: compared against an N'...' literal."""
        result = self.context.bad_types.where("some_varchar", self.filter_value).to_list()
        logger.info(f"GetBadType returned {len(result)} row(s)")
        return result

    def get_good_type(self) -> list[GoodType]:
        """VARCHAR column declared narrow: compared against a plain '...' literal."""
        result = self.context.good_types.where("some_nvarchar", self.filter_value).to_list()
        logger.info(f"GetGoodType returned {len(result)} row(s)")
        return result
