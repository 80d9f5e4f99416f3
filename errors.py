
class DBError(Exception):
    """Base error class"""

class ValidationError(DBError):
    """Invalid input handed to a builder or a mutation."""

class NamingError(ValidationError):
    """Empty or otherwise unusable table/column name."""

class RelationError(ValidationError):
    """Relationship name cannot be resolved."""
