"""
Access policy for metrics operations.

A caller may refresh or read a business's metrics when they are a
platform administrator or a live member of that business. The check runs
before the engine reads any business data.
"""

from backoffice.core.exceptions import AuthorizationError
from backoffice.core.logging import get_logger
from backoffice.db.data_source import MetricsDataSource
from backoffice.repositories.business import BusinessAccessRepository

logger = get_logger(__name__)


class MetricsAccessPolicy:

    def __init__(self, data_source: MetricsDataSource):
        self.data_source = data_source

    def can_access(self, user_id: str, business_id: str) -> bool:
        with self.data_source.session() as db:
            repo = BusinessAccessRepository(db)
            return repo.is_platform_admin(user_id) or repo.is_member(user_id, business_id)

    def ensure_can_refresh(self, user_id: str, business_id: str) -> None:
        """
        Raises:
            AuthorizationError: caller is neither admin nor member
        """
        if not self.can_access(user_id, business_id):
            logger.warning(
                f"User {user_id} denied metrics access for business {business_id}"
            )
            raise AuthorizationError(
                "Not a member of this business",
                required_permission="business_member",
            )
