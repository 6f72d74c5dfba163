"""
Exception types raised by the simulator core.

None of these cross the dynamics facade: configuration problems are
reported through the return code of ``init()``, table problems are
contained per coefficient channel by the aerodynamics layer, and a
malformed command vector makes ``process()`` skip the step.
"""


class ConfigError(ValueError):
    """A required configuration key is missing or has the wrong shape."""


class WrongTableError(ValueError):
    """A lookup table is too short or has a degenerate bracketing step."""


class WrongCommandSizeError(ValueError):
    """An actuator command vector does not have exactly eight channels."""
