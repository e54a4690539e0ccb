"""SQLAlchemy Base class for all models."""
from backoffice.models.base import Base


def import_models():
    """Import all models to register them with SQLAlchemy."""
    import backoffice.models  # noqa: F401


# Import models on module load
import_models()

__all__ = ["Base", "import_models"]
