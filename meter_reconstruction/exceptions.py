"""
Exceptions raised by the meter reconstruction engine
"""


class MeterReconstructionError(Exception):
    """Base class for all errors raised by this package"""


class InvalidOrderError(MeterReconstructionError, ValueError):
    """Interpolation was called with the previous reading after the next one"""


class DegenerateIntervalError(MeterReconstructionError, ValueError):
    """Interpolation was called with two readings at the same timestamp"""


class InvalidInputError(MeterReconstructionError, ValueError):
    """Input does not have the shape the engine requires"""
