"""Exceptions raised by the pricing engine."""


class PricingValidationError(ValueError):
    """Raised when pricing input fails a validation rule."""


class DegeneratePricingError(ArithmeticError):
    """Raised when the formula would divide by zero or a non-positive fee denominator."""
