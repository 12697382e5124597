import logging
from typing import Any, Dict, List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .errors import StorageError
from .models import Book
from .schemas import BookIn

logger = logging.getLogger(__name__)


def serialize_book(book: Book) -> Dict[str, Any]:
    return {
        "id": book.id,
        "title": book.title,
        "description": book.description,
        "is_available": book.is_available,
        "imgsrc": book.imgsrc,
    }


def list_books(db: Session) -> List[Dict[str, Any]]:
    try:
        books = db.query(Book).order_by(Book.id).all()
    except SQLAlchemyError as e:
        logger.exception("Failed to list books")
        raise StorageError("Failed to fetch books") from e
    return [serialize_book(b) for b in books]


def create_book(db: Session, book_in: BookIn) -> Dict[str, Any]:
    # Fields are passed through as-is; the store enforces NOT NULL on title.
    book = Book(
        title=book_in.title,
        description=book_in.description,
        imgsrc=book_in.imgsrc,
    )
    if book_in.is_available is not None:
        book.is_available = book_in.is_available
    try:
        db.add(book)
        db.commit()
        db.refresh(book)
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning("Failed to add book: %s", e)
        raise StorageError("Failed to add book") from e
    logger.info("Added book %s (id=%s)", book.title, book.id)
    return serialize_book(book)


def delete_book(db: Session, book_id: int) -> Dict[str, Any]:
    try:
        book = db.query(Book).filter(Book.id == book_id).first()
        if not book:
            raise StorageError(f"Book {book_id} does not exist")
        db.delete(book)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning("Failed to delete book %s: %s", book_id, e)
        raise StorageError("Failed to delete book") from e
    logger.info("Deleted book %s", book_id)
    return {"message": "Book deleted", "id": book_id}
