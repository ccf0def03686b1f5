"""
Seed three demo classes (Yoga, Zumba, HIIT) in consecutive, non-overlapping weeks.
- Default: adds missing classes only.
- --force: deletes all bookings and classes first.
Classes go through the normal catalog checks, so a seed that would overlap
an existing class is reported and skipped.
"""

import sys
from datetime import time, timedelta

import gym_service
from databases_sql import SessionLocal, class_names, clear_all, init_db
from models import GymClassRequest
from utils import today

DEMO_CLASSES = [
    # name, start offset (days), length (days), start time, duration, capacity
    ("Yoga", 1, 7, time(9, 0), 60, 15),
    ("Zumba", 8, 7, time(17, 0), 45, 20),
    ("HIIT", 15, 7, time(7, 0), 30, 12),
]


def seed_classes(force=False):
    db = SessionLocal()
    try:
        if force:
            clear_all(db)
            db.commit()
            print("Cleared all classes and bookings.")

        existing_names = set(class_names(db))
        base = today()

        for name, offset, length, start_time, duration, capacity in DEMO_CLASSES:
            if name in existing_names:
                continue
            start = base + timedelta(days=offset)
            req = GymClassRequest(
                name=name,
                start_date=start,
                end_date=start + timedelta(days=length - 1),
                start_time=start_time,
                duration=duration,
                capacity=capacity,
            )
            result = gym_service.create_class(db, req)
            if result.success:
                print(f"Seeded: {name} {req.start_date} to {req.end_date} at {start_time.strftime('%I:%M %p')}")
            else:
                print(f"Skipped {name}: {result.message}")
    finally:
        db.close()


if __name__ == "__main__":
    init_db()
    force_flag = "--force" in sys.argv
    seed_classes(force=force_flag)
