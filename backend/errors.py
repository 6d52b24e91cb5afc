"""Domain exceptions. Routers translate these to HTTP errors."""


class TubeCalcError(Exception):
    """Base class for calculator errors."""


class CalculationError(TubeCalcError):
    """Computed weight is zero, negative, or not finite."""

    def __init__(self, message: str = "Unable to calculate weight with the given parameters.", value=None):
        super().__init__(message)
        self.value = value


class InvalidMaterialError(TubeCalcError):
    """Custom material with a missing name or a non-positive density."""

    def __init__(self, name, density):
        super().__init__(f"Invalid material {name!r}: density must be greater than 0 (got {density!r})")
        self.name = name
        self.density = density


class LineItemNotFound(TubeCalcError):
    def __init__(self, item_id: str):
        super().__init__(f"Tube {item_id!r} not found")
        self.item_id = item_id


class EmptyCalculationError(TubeCalcError):
    """Save/export requested on a list with no tubes."""
