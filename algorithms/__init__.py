from .math_tools import MathTools
from .date_tools import DateTools

__all__ = ["MathTools", "DateTools"]
