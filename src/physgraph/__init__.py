"""physgraph - dimensional consistency checks for physics notes."""

from . import core
from .core import Dimension, FailureReason, ParseFailure, Parsed
from .markup import dimension_of
from .units import parse_unit_expr
from .validation import check_equation
from .version import __version__

__all__ = [
    "core",
    "Dimension",
    "FailureReason",
    "ParseFailure",
    "Parsed",
    "dimension_of",
    "parse_unit_expr",
    "check_equation",
    "__version__",
]
