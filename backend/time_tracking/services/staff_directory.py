import re
from datetime import datetime
from typing import List

from pymongo.errors import DuplicateKeyError, PyMongoError

from time_tracking.exceptions import StoreUnavailable, ValidationFailure, WriteFailure
from time_tracking.models.staff import DEFAULT_STAFF, StaffMember
from time_tracking.utils.logger import log_error

STAFF = "staff"


def normalize_staff_id(staff_id: str) -> str:
    """'John Doe' -> 'john_doe'"""
    return re.sub(r"\s+", "_", staff_id.strip().lower())


class StaffDirectory:
    def __init__(self, db):
        self.db = db

    async def add_staff(self, staff_id: str, name: str, role: str) -> StaffMember:
        if self.db is None:
            raise WriteFailure("Database connection failed")

        member = StaffMember(
            id=normalize_staff_id(staff_id),
            name=name.strip(),
            role=role.strip(),
            active=True,
            createdAt=datetime.utcnow(),
        )
        if not member.id:
            raise ValidationFailure("Missing staff id")

        try:
            await self.db[STAFF].insert_one({"_id": member.id, **member.model_dump()})
        except DuplicateKeyError:
            raise ValidationFailure(f"Staff member '{member.id}' already exists")
        except PyMongoError as e:
            log_error("Failed to add staff member", e, staff_id=member.id)
            raise WriteFailure(str(e)) from e

        return member

    async def list_staff(self) -> List[StaffMember]:
        """Stored staff members, or the default roster while none have been added."""
        if self.db is None:
            raise StoreUnavailable("Database connection failed")

        try:
            docs = await self.db[STAFF].find({}).sort("name", 1).to_list(None)
        except PyMongoError as e:
            log_error("Failed to load staff", e)
            raise StoreUnavailable(str(e)) from e

        if not docs:
            return [member.model_copy() for member in DEFAULT_STAFF]

        members = []
        for doc in docs:
            members.append(StaffMember(
                id=doc.get("id") or str(doc["_id"]),
                name=doc.get("name", ""),
                role=doc.get("role", ""),
                active=doc.get("active") is not False,
                createdAt=doc.get("createdAt"),
            ))
        return members
