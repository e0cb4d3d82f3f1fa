"""ApiBake: render OpenAPI 3 specifications as paginated PDF documentation."""

__version__ = "1.0.0"
