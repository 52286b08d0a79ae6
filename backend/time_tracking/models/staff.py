from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class StaffMember(BaseModel):
    id: str
    name: str
    role: str
    active: bool = True
    createdAt: Optional[datetime] = None


class StaffCreate(BaseModel):
    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    role: str = Field(..., min_length=1)


# Shown by the dashboard until the first staff member is added
DEFAULT_STAFF = [
    StaffMember(id="john_doe", name="John Doe", role="Floor Manager"),
    StaffMember(id="jane_smith", name="Jane Smith", role="Sales Associate"),
]
