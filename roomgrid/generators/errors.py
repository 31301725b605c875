"""
Exception hierarchy for layout generation.

Ordinary search failure is never an exception; it comes back as a
``SearchResult`` with ``success=False``. These exceptions signal programming
or configuration errors that no amount of re-seeding fixes.
"""


class GenerationError(Exception):
    pass


class ConfigurationError(GenerationError):
    pass


class CatalogError(GenerationError):
    pass


class LayoutError(GenerationError):
    pass


class FrontierError(GenerationError):
    pass


class SearchInvariantError(GenerationError):
    pass
