from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..database import get_db
from ..errors import ValidationError
from ..loans import borrow_book, list_all_loans, list_user_loans, update_loan_status
from ..schemas import BorrowIn, LoanStatusIn

router = APIRouter()


# Older clients post to /borrow-book; both paths run the same workflow.
@router.post("/api/borrow-book", status_code=201)
@router.post("/borrow-book", status_code=201, include_in_schema=False)
def borrow(borrow_in: BorrowIn, db: Session = Depends(get_db)):
    loan = borrow_book(db, borrow_in.user_id, borrow_in.book_id, borrow_in.borrow_date, borrow_in.due_date)
    return {"message": "Book borrowed successfully", "loan": loan}


@router.get("/borrowed-books")
def user_borrowed_books(user_id: Optional[str] = Query(default=None, alias="userId"), db: Session = Depends(get_db)):
    try:
        user_id = int(user_id)
    except (TypeError, ValueError):
        raise ValidationError("Invalid user id")
    return {"books": list_user_loans(db, user_id)}


@router.get("/api/borrowedbooks")
def all_borrowed_books(db: Session = Depends(get_db)):
    return list_all_loans(db)


@router.put("/api/borrowedbooks/{loan_id}")
def set_borrowed_book_status(loan_id: int, status_in: LoanStatusIn, db: Session = Depends(get_db)):
    return update_loan_status(db, loan_id, status_in.status)
