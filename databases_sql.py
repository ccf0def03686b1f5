# SQLAlchemy tables, engine/session setup and the query helpers the service uses.

from dataclasses import dataclass
from datetime import date, time
from typing import Iterator, List, Optional, Tuple

from sqlalchemy import (CheckConstraint, Column, Date, ForeignKey, Index, Integer,
                        String, Time, create_engine, delete, event, func, select)
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from config import DATABASE_URL

Base = declarative_base()


class GymClass(Base):
    __tablename__ = "gym_class"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(120), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    start_time = Column(Time, nullable=False)
    duration = Column(Integer, nullable=False)  # minutes
    capacity = Column(Integer, nullable=False)

    __table_args__ = (
        CheckConstraint("capacity > 0", name="check_gym_class_capacity_positive"),
        CheckConstraint("duration > 0", name="check_gym_class_duration_positive"),
        CheckConstraint("start_date <= end_date", name="check_gym_class_window"),
        Index("idx_gym_class_window", "start_date", "end_date"),
    )

    def __repr__(self) -> str:
        return f"<GymClass(id={self.id}, name={self.name}, {self.start_date}..{self.end_date})>"


class Booking(Base):
    __tablename__ = "class_booking"

    id = Column(Integer, primary_key=True, autoincrement=True)
    member_name = Column(String(120), nullable=False)
    # Plain foreign key; the class is fetched explicitly when needed.
    gym_class_id = Column(Integer, ForeignKey("gym_class.id"), nullable=False)
    participation_date = Column(Date, nullable=False)

    __table_args__ = (
        Index("idx_booking_member_name", "member_name"),
        Index("idx_booking_participation_date", "participation_date"),
        Index("idx_booking_composite", "member_name", "participation_date"),
        Index("idx_booking_class_date", "gym_class_id", "participation_date"),
    )

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, member={self.member_name}, class={self.gym_class_id})>"


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


def _register_sqlite_functions(dbapi_conn, connection_record):
    # SQLite's lower() only folds ASCII letters
    dbapi_conn.create_function("unicode_lower", 1, _unicode_lower)


def make_engine(url: str = DATABASE_URL):
    kwargs = {}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if url in ("sqlite://", "sqlite:///:memory:"):
            # one shared connection, otherwise every thread sees its own empty db
            kwargs["poolclass"] = StaticPool
    eng = create_engine(url, **kwargs)
    if eng.dialect.name == "sqlite":
        event.listen(eng, "connect", _register_sqlite_functions)
    return eng


engine = make_engine()
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


def init_db(bind=None):
    Base.metadata.create_all(bind=bind or engine)


def get_db() -> Iterator[Session]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# ---------- Classes ----------
def insert_class(db: Session, name: str, start_date: date, end_date: date,
                 start_time: time, duration: int, capacity: int) -> GymClass:
    gym_class = GymClass(
        name=name,
        start_date=start_date,
        end_date=end_date,
        start_time=start_time,
        duration=duration,
        capacity=capacity,
    )
    db.add(gym_class)
    db.flush()
    return gym_class


def count_overlapping_classes(db: Session, start_date: date, end_date: date) -> int:
    stmt = select(func.count(GymClass.id)).where(
        GymClass.start_date <= end_date,
        GymClass.end_date >= start_date,
    )
    return db.execute(stmt).scalar_one()


def get_class(db: Session, class_id: int, for_update: bool = False) -> Optional[GymClass]:
    stmt = select(GymClass).where(GymClass.id == class_id)
    if for_update:
        stmt = stmt.with_for_update()
    return db.execute(stmt).scalar_one_or_none()


def list_classes(db: Session, on: Optional[date] = None) -> List[GymClass]:
    stmt = select(GymClass)
    if on is not None:
        stmt = stmt.where(GymClass.start_date <= on, GymClass.end_date >= on)
    stmt = stmt.order_by(GymClass.start_date, GymClass.id)
    return list(db.execute(stmt).scalars().all())


def class_names(db: Session) -> List[str]:
    return list(db.execute(select(GymClass.name)).scalars().all())


# ---------- Bookings ----------
def count_bookings_for_class(db: Session, class_id: int, participation_date: date) -> int:
    stmt = select(func.count(Booking.id)).where(
        Booking.gym_class_id == class_id,
        Booking.participation_date == participation_date,
    )
    return db.execute(stmt).scalar_one()


def insert_booking(db: Session, class_id: int, member_name: str,
                   participation_date: date) -> Booking:
    booking = Booking(
        gym_class_id=class_id,
        member_name=member_name,
        participation_date=participation_date,
    )
    db.add(booking)
    db.flush()
    return booking


@dataclass(frozen=True)
class BookingFilter:
    """Optional search criteria; an unset or empty field is not applied."""
    member_name: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None


def _contains_pattern(text: str) -> str:
    escaped = text.lower().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _lowered(db: Session, column):
    if db.get_bind().dialect.name == "sqlite":
        return func.unicode_lower(column)
    return func.lower(column)


def search_bookings(db: Session, criteria: BookingFilter) -> List[Tuple[Booking, str]]:
    """Bookings matching every set filter, paired with their class name."""
    stmt = select(Booking, GymClass.name).join(GymClass, Booking.gym_class_id == GymClass.id)
    if criteria.member_name:
        stmt = stmt.where(
            _lowered(db, Booking.member_name).like(_contains_pattern(criteria.member_name), escape="\\")
        )
    if criteria.start_date is not None:
        stmt = stmt.where(Booking.participation_date >= criteria.start_date)
    if criteria.end_date is not None:
        stmt = stmt.where(Booking.participation_date <= criteria.end_date)
    stmt = stmt.order_by(Booking.participation_date, Booking.id)
    return [(booking, name) for booking, name in db.execute(stmt).all()]


def clear_all(db: Session):
    db.execute(delete(Booking))
    db.execute(delete(GymClass))
