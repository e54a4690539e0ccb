"""
Business access repository: admin flags and business membership lookups
used by the authorization boundary.
"""

from sqlalchemy import select
from sqlalchemy.orm import Session

from backoffice.models import BusinessMember, UserProfile
from backoffice.repositories.base.base_repository import BaseRepository


class BusinessAccessRepository(BaseRepository[BusinessMember]):

    def __init__(self, db: Session):
        super().__init__(BusinessMember, db)

    def is_platform_admin(self, user_id: str) -> bool:
        stmt = select(UserProfile.is_admin).where(UserProfile.id == str(user_id))
        return bool(self.db.execute(stmt).scalar_one_or_none())

    def is_member(self, user_id: str, business_id: str) -> bool:
        stmt = self._live(
            select(BusinessMember.id).where(
                BusinessMember.user_id == str(user_id),
                BusinessMember.business_id == str(business_id),
            )
        )
        return self.db.execute(stmt).first() is not None
