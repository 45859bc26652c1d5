"""
Exception types for the conductor state core.

Only fatal conditions are exceptions. A dispatch addressed to a missing
store or handler is recoverable and never raises.
"""


class ConductorError(Exception):
    """Base class for conductor failures."""
    pass


class UnknownEffectError(ConductorError):
    """Raised when an effect map names an effect with no registered reducer."""

    def __init__(self, effect_name: str):
        super().__init__(f"Conductor-error: effect '{effect_name}' isn't allowed or registered")
        self.effect_name = effect_name


class MissingLocalStateError(ConductorError):
    """Raised when a store has no local state cell to write into."""

    def __init__(self, store_id: str):
        super().__init__(f"Store with id: {store_id} doesn't have local state. Can't change its state")
        self.store_id = store_id


class InvalidStoreError(ConductorError):
    """Raised when a store fails validation at registration time."""
    pass


class ReentrantDispatchError(ConductorError):
    """Raised when dispatch is called from inside another dispatch."""
    pass


class ConfigError(ConductorError):
    """Raised when environment configuration cannot be parsed."""
    pass
