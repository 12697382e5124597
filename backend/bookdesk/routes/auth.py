from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..auth import authenticate, register_user
from ..config import settings
from ..database import get_db
from ..mailer import get_mailer, send_otp
from ..schemas import LoginIn, OtpIn, RegisterIn, UserOut

router = APIRouter()


@router.post("/register", status_code=201)
def register(user_in: RegisterIn, db: Session = Depends(get_db)):
    user = register_user(db, user_in)
    return {
        "message": "User registered successfully",
        "user": UserOut.model_validate(user).model_dump(by_alias=True),
    }


@router.post("/login")
def login(login_in: LoginIn, db: Session = Depends(get_db)):
    result = authenticate(db, login_in.email, login_in.password, login_in.user_type)
    return {"message": "Login successful", **result}


@router.post("/send-otp")
def otp(otp_in: OtpIn, mailer=Depends(get_mailer)):
    code = send_otp(mailer, otp_in.email)
    body = {"message": "OTP sent successfully"}
    if settings.expose_otp:
        body["otp"] = code
    return body
