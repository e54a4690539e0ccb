from backoffice.schemas.common.base import BaseSchema

__all__ = ["BaseSchema"]
