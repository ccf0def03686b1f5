"""
Class catalog, booking workflow and booking search.

Every operation returns a GenericResponse. Business-rule failures are raised
as GymServiceError subclasses inside the operation and converted to a failure
envelope before returning; anything unexpected is logged, rolled back and
reported with a fixed message.
"""
import logging
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

import databases_sql as store
import responses
from exceptions import (CapacityError, ConflictError, GymServiceError, InternalError,
                        NotFoundError, ValidationError)
from models import BookingOut, BookRequest, GenericResponse, GymClassOut, GymClassRequest
from utils import end_time, format_date_range, is_today_or_future

logger = logging.getLogger("gym_booking_api.service")


def _class_out(gym_class: store.GymClass, available_slots: Optional[int] = None) -> GymClassOut:
    return GymClassOut(
        id=gym_class.id,
        name=gym_class.name,
        start_date=gym_class.start_date,
        end_date=gym_class.end_date,
        start_time=gym_class.start_time,
        end_time=end_time(gym_class.start_time, gym_class.duration),
        duration=gym_class.duration,
        capacity=gym_class.capacity,
        available_slots=available_slots,
    )


def _booking_out(booking: store.Booking, class_name: str) -> BookingOut:
    return BookingOut(
        id=booking.id,
        member_name=booking.member_name,
        gym_class_id=booking.gym_class_id,
        gym_class_name=class_name,
        participation_date=booking.participation_date,
    )


def _require(condition: bool, message: str):
    if not condition:
        raise ValidationError(message)


# ---------- Class Catalog ----------
def _check_class_request(req: GymClassRequest):
    _require(bool(req.name and req.name.strip()), "Class name is required")
    _require(is_today_or_future(req.start_date), "Start date must be today or in the future")
    _require(is_today_or_future(req.end_date), "End date must be today or in the future")
    _require(req.duration >= 1, "Duration must be at least 1 minute")
    _require(req.capacity >= 1, "Capacity must be at least 1")
    if req.end_date < req.start_date:
        raise ValidationError("End date must be after start date")


def create_class(db: Session, req: GymClassRequest) -> GenericResponse:
    """Create a class, rejecting any date window that overlaps an existing class."""
    try:
        _check_class_request(req)

        overlapping = store.count_overlapping_classes(db, req.start_date, req.end_date)
        if overlapping > 0:
            raise ConflictError("A class is already scheduled in this date range")

        gym_class = store.insert_class(
            db,
            name=req.name.strip(),
            start_date=req.start_date,
            end_date=req.end_date,
            start_time=req.start_time,
            duration=req.duration,
            capacity=req.capacity,
        )
        db.commit()

        out = _class_out(gym_class)
        logger.info("Class created successfully: %s", out)
        return responses.success(out, responses.CLASS_CREATED_SUCCESS, 201)
    except GymServiceError as e:
        db.rollback()
        logger.warning("Class creation rejected: %s", e.message)
        return responses.from_exception(e, responses.CLASS_CREATION_ERROR_CODE)
    except Exception:
        db.rollback()
        logger.exception("Error creating class")
        return responses.from_exception(
            InternalError(responses.DEFAULT_ERROR_MESSAGE), responses.CLASS_CREATION_ERROR_CODE
        )


def get_class(db: Session, class_id: int) -> GenericResponse:
    try:
        gym_class = store.get_class(db, class_id)
        if gym_class is None:
            raise NotFoundError(responses.ERROR_CLASS_NOT_FOUND)
        return responses.success(_class_out(gym_class))
    except GymServiceError as e:
        return responses.from_exception(e, responses.CLASS_LOOKUP_ERROR_CODE)
    except Exception:
        logger.exception("Error fetching class %s", class_id)
        return responses.from_exception(
            InternalError(responses.DEFAULT_ERROR_MESSAGE), responses.CLASS_LOOKUP_ERROR_CODE
        )


def list_classes(db: Session, on: Optional[date] = None) -> GenericResponse:
    """All classes by start date; with `on`, only those running that day plus free seats."""
    try:
        out = []
        for gym_class in store.list_classes(db, on):
            available = None
            if on is not None:
                booked = store.count_bookings_for_class(db, gym_class.id, on)
                available = max(0, gym_class.capacity - booked)
            out.append(_class_out(gym_class, available))
        return responses.success(out)
    except Exception:
        logger.exception("Error listing classes")
        return responses.from_exception(
            InternalError(responses.DEFAULT_ERROR_MESSAGE), responses.CLASS_LOOKUP_ERROR_CODE
        )


# ---------- Booking Workflow ----------
def book_class(db: Session, req: BookRequest) -> GenericResponse:
    """
    Book a seat in a class for one participation date.

    The class row is locked for the rest of the transaction, so on engines
    with row locks the capacity count and the insert cannot interleave with
    another booking for the same class.
    """
    try:
        _require(bool(req.member_name and req.member_name.strip()), "Member name is required")
        _require(is_today_or_future(req.participation_date),
                 "Participation date must be today or in the future")

        gym_class = store.get_class(db, req.gym_class_id, for_update=True)
        if gym_class is None:
            logger.warning("Class not found for booking: %s", req)
            raise NotFoundError(responses.ERROR_CLASS_NOT_FOUND)

        if not gym_class.start_date <= req.participation_date <= gym_class.end_date:
            logger.warning(
                "Participation date %s is outside the allowed range for class %s (%s to %s)",
                req.participation_date, gym_class.id, gym_class.start_date, gym_class.end_date,
            )
            raise ValidationError(
                "Participation date must be within the class schedule range ("
                + format_date_range(gym_class.start_date, gym_class.end_date) + ")"
            )

        current = store.count_bookings_for_class(db, gym_class.id, req.participation_date)
        logger.info("Current bookings for class %s on %s: %s",
                    gym_class.id, req.participation_date, current)
        if current >= gym_class.capacity:
            raise CapacityError(responses.ERROR_CAPACITY_EXCEEDED)

        booking = store.insert_booking(
            db, gym_class.id, req.member_name.strip(), req.participation_date
        )
        db.commit()

        out = _booking_out(booking, gym_class.name)
        logger.info("Class booked successfully: %s", out)
        return responses.success(out, responses.BOOKING_SUCCESS, 201)
    except GymServiceError as e:
        db.rollback()
        logger.warning("Booking failed: %s", e.message)
        return responses.from_exception(e, responses.BOOKING_ERROR_CODE)
    except Exception:
        db.rollback()
        logger.exception("Unexpected error during booking")
        return responses.from_exception(
            InternalError(responses.ERROR_BOOKING_FAILED), responses.BOOKING_ERROR_CODE
        )


# ---------- Query Service ----------
def search_bookings(db: Session, member_name: Optional[str] = None,
                    start_date: Optional[date] = None,
                    end_date: Optional[date] = None) -> GenericResponse:
    try:
        criteria = store.BookingFilter(member_name, start_date, end_date)
        rows = store.search_bookings(db, criteria)
        if not rows:
            return responses.success([], responses.NO_BOOKINGS_FOUND)
        return responses.success([_booking_out(b, name) for b, name in rows])
    except Exception:
        logger.exception("Error fetching bookings")
        return responses.from_exception(
            InternalError(responses.DEFAULT_ERROR_MESSAGE), responses.BOOKING_ERROR_CODE
        )
