from .base import WorkTimeCalculator
from .standard_calculator import StandardWorkTimeCalculator, minutes_between

__all__ = ["WorkTimeCalculator", "StandardWorkTimeCalculator", "minutes_between"]
