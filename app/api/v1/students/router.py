from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.students.schemas import (
    CreateStudentRequest,
    MessageResponse,
    StudentListResponse,
    StudentResponse,
    StudentStatsResponse,
    UpdateAmountRequest,
    UpdateAmountResponse,
    UpdatePaymentStatusRequest,
    UpdateStudentRequest,
)
from app.api.v1.students.service import StudentService
from app.core.deps import get_db, get_current_active_user, get_now
from app.models.enums import PaymentStatus
from app.models.user import User

router = APIRouter(dependencies=[Depends(get_current_active_user)])


@router.post(
    "/",
    response_model=StudentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a student",
    description="Create a student and not-paid payment records from the current month through December.",
)
async def create_student(
    data: CreateStudentRequest,
    db: AsyncSession = Depends(get_db),
    now: datetime = Depends(get_now),
):
    return await StudentService(db).create_student(data, now)


async def _list(db, now, class_id, month, page, search, status_filter):
    return await StudentService(db).list_students(
        class_id=class_id, now=now, month=month, page=page, search=search, status_filter=status_filter
    )


@router.get(
    "/",
    response_model=StudentListResponse,
    summary="List students with payment status",
    description="Eligible students of a class for one month (default current), 15 per page. "
                "Unpaid rows include payment_due (days outstanding).",
)
async def get_students(
    class_id: UUID = Query(..., description="Class ID"),
    month: Optional[str] = Query(None, description="Month code (JAN..DEC), default current month"),
    page: int = Query(1, ge=1),
    search: Optional[str] = Query(None, description="Search by student name"),
    db: AsyncSession = Depends(get_db),
    now: datetime = Depends(get_now),
):
    return await _list(db, now, class_id, month, page, search, None)


@router.get("/paid", response_model=StudentListResponse, summary="List paid students")
async def get_paid_students(
    class_id: UUID = Query(...),
    month: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    search: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
    now: datetime = Depends(get_now),
):
    return await _list(db, now, class_id, month, page, search, PaymentStatus.paid.value)


@router.get("/unpaid", response_model=StudentListResponse, summary="List unpaid students")
async def get_unpaid_students(
    class_id: UUID = Query(...),
    month: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    search: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
    now: datetime = Depends(get_now),
):
    return await _list(db, now, class_id, month, page, search, PaymentStatus.not_paid.value)


@router.get(
    "/stats",
    response_model=StudentStatsResponse,
    summary="Paid/unpaid counts for a class and month",
)
async def get_student_stats(
    class_id: UUID = Query(...),
    month: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
    now: datetime = Depends(get_now),
):
    return await StudentService(db).get_stats(class_id, now, month)


@router.post(
    "/update-status",
    response_model=MessageResponse,
    summary="Update payment status",
    description="Mark a student's record for a month of the current year as paid or not-paid.",
)
async def update_payment_status(
    data: UpdatePaymentStatusRequest,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
    now: datetime = Depends(get_now),
):
    await StudentService(db).update_payment_status(data, current_user, now)
    return MessageResponse(message="Student payment status updated successfully")


@router.post(
    "/update-amount",
    response_model=UpdateAmountResponse,
    summary="Update payment amount",
)
async def update_payment_amount(
    data: UpdateAmountRequest,
    db: AsyncSession = Depends(get_db),
    now: datetime = Depends(get_now),
):
    record = await StudentService(db).update_amount(data, now)
    return UpdateAmountResponse(amount=record.amount)


@router.put(
    "/{student_id}",
    response_model=StudentResponse,
    summary="Update student details",
)
async def update_student(
    student_id: UUID,
    data: UpdateStudentRequest,
    db: AsyncSession = Depends(get_db),
):
    return await StudentService(db).update_student(student_id, data)


@router.delete(
    "/{student_id}",
    response_model=MessageResponse,
    summary="Delete student",
    description="Delete a student with all payment records and notification logs.",
)
async def delete_student(
    student_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    await StudentService(db).delete_student(student_id)
    return MessageResponse(message="Student deleted successfully")


@router.post(
    "/{student_id}/remove",
    response_model=MessageResponse,
    summary="Remove student from class",
    description="Mark the student inactive and delete their unpaid records. Paid records are kept.",
)
async def remove_from_class(
    student_id: UUID,
    db: AsyncSession = Depends(get_db),
    now: datetime = Depends(get_now),
):
    await StudentService(db).remove_from_class(student_id, now)
    return MessageResponse(message="Student removed from class successfully")
