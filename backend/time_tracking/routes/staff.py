from fastapi import APIRouter, Depends

from time_tracking.db import get_db, get_staff_directory
from time_tracking.models.staff import StaffCreate
from time_tracking.services.staff_directory import StaffDirectory
from time_tracking.utils.cors import cors_json, preflight
from time_tracking.utils.logger import EventTypes, log_event

router = APIRouter()

STAFF_METHODS = ["GET", "POST", "OPTIONS"]


@router.get("")
async def list_staff(directory: StaffDirectory = Depends(get_staff_directory)):
    staff = await directory.list_staff()
    return cors_json({"success": True, "staff": staff}, STAFF_METHODS)


@router.post("", status_code=201)
async def add_staff(
    staff: StaffCreate,
    directory: StaffDirectory = Depends(get_staff_directory),
    db=Depends(get_db)
):
    member = await directory.add_staff(staff.id, staff.name, staff.role)
    await log_event(db, EventTypes.STAFF_CREATED, {"name": member.name, "role": member.role}, staff_id=member.id)

    return cors_json({"success": True, "staff": member}, STAFF_METHODS, status_code=201)


@router.options("")
async def staff_options():
    return preflight(STAFF_METHODS)
