from backoffice.repositories.business.business_access_repository import BusinessAccessRepository

__all__ = ["BusinessAccessRepository"]
