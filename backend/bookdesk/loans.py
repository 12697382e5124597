"""Borrow/return workflow.

A loan is either active (``returned`` false) or returned. A user may hold at
most one active loan; borrowing checks for one first, and the partial unique
index on ``borrowed_books`` catches the case where two requests pass the
check at the same time.
"""
import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from .config import settings
from .errors import PolicyError, StorageError, ValidationError
from .models import Book, Loan

logger = logging.getLogger(__name__)

ACTIVE_LOAN_MESSAGE = "You must return your current borrowed book before borrowing another"


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def has_active_loan(db: Session, user_id: int) -> bool:
    return (
        db.query(Loan.id)
        .filter(Loan.user_id == user_id, Loan.returned.is_(False))
        .first()
        is not None
    )


def borrow_book(
    db: Session,
    user_id: Optional[int],
    book_id: Optional[int],
    borrow_date: Optional[datetime] = None,
    due_date: Optional[datetime] = None,
) -> Dict[str, Any]:
    if user_id is None or book_id is None:
        raise ValidationError("userId and bookId are required")

    borrow_date = borrow_date or datetime.utcnow()
    due_date = due_date or borrow_date + timedelta(days=settings.loan_period_days)

    try:
        if has_active_loan(db, user_id):
            logger.info("User %s already has an active loan; borrow of book %s refused", user_id, book_id)
            raise PolicyError(ACTIVE_LOAN_MESSAGE)
        loan = Loan(user_id=user_id, book_id=book_id, borrow_date=borrow_date, due_date=due_date, returned=False)
        db.add(loan)
        db.commit()
        db.refresh(loan)
    except IntegrityError as e:
        db.rollback()
        try:
            active = (
                db.query(Loan.id)
                .filter(Loan.user_id == user_id, Loan.returned.is_(False))
                .first()
            )
        except SQLAlchemyError:
            logger.exception("Failed to recheck active loans for user %s", user_id)
            active = None
        if active is None:
            logger.warning("Borrow of book %s by user %s rejected by the store: %s", book_id, user_id, e.orig)
            raise StorageError("Failed to borrow book") from e
        # Lost a race with a concurrent borrow by the same user
        logger.info("Concurrent borrow by user %s rejected", user_id)
        raise PolicyError(ACTIVE_LOAN_MESSAGE) from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Failed to borrow book %s for user %s", book_id, user_id)
        raise StorageError("Failed to borrow book") from e

    logger.info("User %s borrowed book %s (loan %s)", user_id, book_id, loan.id)
    return {
        "id": loan.id,
        "userId": loan.user_id,
        "bookId": loan.book_id,
        "borrowDate": _iso(loan.borrow_date),
        "dueDate": _iso(loan.due_date),
        "returned": loan.returned,
    }


def update_loan_status(db: Session, loan_id: int, status: Optional[bool]) -> Dict[str, Any]:
    if status is None:
        raise ValidationError("status is required")
    try:
        loan = db.query(Loan).filter(Loan.id == loan_id).first()
        if not loan:
            raise StorageError(f"Borrow record {loan_id} does not exist")
        loan.returned = status
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning("Failed to update loan %s: %s", loan_id, e)
        raise StorageError("Failed to update borrow status") from e
    logger.info("Loan %s marked returned=%s", loan_id, status)
    return {"id": loan_id, "returned": status}


def list_all_loans(db: Session) -> List[Dict[str, Any]]:
    try:
        rows = (
            db.query(Loan, Book.title, Book.imgsrc)
            .join(Book, Loan.book_id == Book.id)
            .order_by(Loan.borrow_date.desc())
            .all()
        )
    except SQLAlchemyError as e:
        logger.exception("Failed to list borrowed books")
        raise StorageError("Failed to fetch borrowed books") from e
    return [
        {
            "id": loan.id,
            "user_id": loan.user_id,
            "book_id": loan.book_id,
            "borrow_date": _iso(loan.borrow_date),
            "due_date": _iso(loan.due_date),
            "returned": loan.returned,
            "books": {"title": title, "imgsrc": imgsrc},
        }
        for loan, title, imgsrc in rows
    ]


def list_user_loans(db: Session, user_id: int) -> List[Dict[str, Any]]:
    try:
        rows = (
            db.query(Loan, Book.title)
            .join(Book, Loan.book_id == Book.id)
            .filter(Loan.user_id == user_id)
            .order_by(Loan.borrow_date.desc())
            .all()
        )
    except SQLAlchemyError as e:
        logger.exception("Failed to list loans for user %s", user_id)
        raise StorageError("Failed to fetch borrowed books") from e
    return [
        {
            "id": loan.id,
            "book_id": loan.book_id,
            "title": title,
            "borrow_date": _iso(loan.borrow_date),
            "due_date": _iso(loan.due_date),
            "returned": loan.returned,
        }
        for loan, title in rows
    ]
