from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


# Request fields are Optional so that missing values reach the service
# checks and come back as 400 rather than pydantic's 422.


class RegisterIn(BaseModel):
    first_name: Optional[str] = Field(default=None, alias="firstName")
    last_name: Optional[str] = Field(default=None, alias="lastName")
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = Field(default=None, alias="postalCode")
    country: Optional[str] = None

    class Config:
        populate_by_name = True


class UserOut(BaseModel):
    id: int
    first_name: str = Field(serialization_alias="firstName")
    last_name: str = Field(serialization_alias="lastName")
    username: str
    email: str

    class Config:
        from_attributes = True


class LoginIn(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None
    user_type: Optional[str] = Field(default=None, alias="userType")

    class Config:
        populate_by_name = True


class OtpIn(BaseModel):
    email: Optional[str] = None


class BookIn(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    is_available: Optional[bool] = None
    imgsrc: Optional[str] = None


class BorrowIn(BaseModel):
    user_id: Optional[int] = Field(default=None, alias="userId")
    book_id: Optional[int] = Field(default=None, alias="bookId")
    borrow_date: Optional[datetime] = Field(default=None, alias="borrowDate")
    due_date: Optional[datetime] = Field(default=None, alias="dueDate")

    class Config:
        populate_by_name = True


class LoanStatusIn(BaseModel):
    status: Optional[bool] = None
