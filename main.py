from datetime import date
from typing import Optional
import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Path, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

# Local imports
import gym_service
import responses
from config import LOG_LEVEL, SEED_DEMO_DATA
from databases_sql import get_db, init_db
from models import MAX_DB_INT, BookRequest, GymClassRequest
from seed_data import seed_classes

# ---------- Config ----------
logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger("gym_booking_api")


# ---------- App Lifecycle ----------
@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    if SEED_DEMO_DATA:
        seed_classes()
    logger.info("Database initialized.")
    yield
    logger.info("Application shutting down.")

app = FastAPI(title="Gym Class Booking API", lifespan=lifespan)


def _reply(response) -> JSONResponse:
    return JSONResponse(status_code=response.status_code, content=responses.to_body(response))


# ---------- Error Handlers ----------
@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(p) for p in first.get("loc", ()) if p not in ("body", "query", "path"))
        message = f"{field}: {first.get('msg')}" if field else first.get("msg", "Invalid request")
    else:
        message = "Invalid request"
    logger.warning("Rejected malformed request to %s: %s", request.url.path, message)
    return _reply(responses.error(message, 400, responses.VALIDATION_ERROR_CODE))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error("Unhandled error on %s", request.url.path, exc_info=exc)
    return _reply(responses.error(responses.DEFAULT_ERROR_MESSAGE, 500, responses.INTERNAL_ERROR_CODE))


# ---------- API Endpoints ----------
@app.post("/api/v1/classes")
def create_class_api(req: GymClassRequest, db: Session = Depends(get_db)):
    logger.info("Received request to create class: %s", req)
    return _reply(gym_service.create_class(db, req))


@app.get("/api/v1/classes")
def list_classes_api(on: Optional[date] = Query(None), db: Session = Depends(get_db)):
    return _reply(gym_service.list_classes(db, on))


@app.get("/api/v1/classes/{class_id}")
def get_class_api(class_id: int = Path(ge=1, le=MAX_DB_INT), db: Session = Depends(get_db)):
    return _reply(gym_service.get_class(db, class_id))


@app.post("/api/v1/bookings")
def book_class_api(req: BookRequest, db: Session = Depends(get_db)):
    logger.info("Received request to book class: %s", req)
    return _reply(gym_service.book_class(db, req))


@app.get("/api/v1/bookings/search")
def search_bookings_api(
    member_name: Optional[str] = Query(None, alias="memberName"),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    db: Session = Depends(get_db),
):
    logger.info("Received request to search bookings - Member: %s, StartDate: %s, EndDate: %s",
                member_name, start_date, end_date)
    return _reply(gym_service.search_bookings(db, member_name, start_date, end_date))


# ---------- Run ----------
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="127.0.0.1", port=8000, reload=True)
