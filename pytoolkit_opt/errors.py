from logging import getLogger

logger = getLogger(__name__)


class OptionError(Exception):
    """
    Base class for errors raised by this package
    """


class UnmarshalError(OptionError, ValueError):
    """
    Raised when a JSON value is not null and cannot be decoded into the option's type
    """

    def __init__(self, data: bytes | str | object, reason: str):
        logger.debug("Failed to decode %r: %s", data, reason)
        self.data = data
        super().__init__(f"Cannot decode option value: {reason}")
