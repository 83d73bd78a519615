from .errors import OptionError, UnmarshalError
from .nullable import NullableColumn
from .option import EMPTY_STR, Option

__all__ = [
    "Option",
    "NullableColumn",
    "OptionError",
    "UnmarshalError",
    "EMPTY_STR",
]
