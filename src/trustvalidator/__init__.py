"""TrustValidator - declarative field validation for forms."""

__version__ = "0.1.0"
