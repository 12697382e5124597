from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..catalog import create_book, delete_book, list_books
from ..database import get_db
from ..schemas import BookIn

router = APIRouter()


@router.get("")
def get_books(db: Session = Depends(get_db)):
    return list_books(db)


@router.post("", status_code=201)
def add_book(book_in: BookIn, db: Session = Depends(get_db)):
    return create_book(db, book_in)


@router.delete("/{book_id}")
def remove_book(book_id: int, db: Session = Depends(get_db)):
    return delete_book(db, book_id)
