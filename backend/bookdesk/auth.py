import hashlib
import hmac
import logging
from typing import Any, Dict

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from .config import settings
from .errors import AuthError, StorageError, ValidationError
from .models import Admin, User
from .schemas import RegisterIn

logger = logging.getLogger(__name__)

USER_TYPES = ("user", "admin")
INVALID_CREDENTIALS = "Invalid email or password"


def get_password_hash(password: str) -> str:
    # Keyed and unsalted: the same password always yields the same digest.
    key = settings.secret_key.encode("utf-8")
    return hmac.new(key, password.encode("utf-8"), hashlib.sha256).hexdigest()


def verify_password(plain_password: str, hashed_password: str) -> bool:
    if not plain_password or not hashed_password:
        return False
    return hmac.compare_digest(get_password_hash(plain_password), hashed_password)


def register_user(db: Session, user_in: RegisterIn) -> User:
    required = {
        "firstName": user_in.first_name,
        "lastName": user_in.last_name,
        "username": user_in.username,
        "email": user_in.email,
        "password": user_in.password,
    }
    missing = [name for name, value in required.items() if not value]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    user = User(
        first_name=user_in.first_name,
        last_name=user_in.last_name,
        username=user_in.username,
        email=user_in.email,
        password_hash=get_password_hash(user_in.password),
        address=user_in.address,
        city=user_in.city,
        state=user_in.state,
        postal_code=user_in.postal_code,
        country=user_in.country,
    )
    try:
        db.add(user)
        db.commit()
        db.refresh(user)
    except IntegrityError as e:
        db.rollback()
        logger.info("Registration rejected for %s: %s", user_in.email, e.orig)
        raise StorageError("Registration failed: username or email already in use") from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Registration failed for %s", user_in.email)
        raise StorageError("Registration failed") from e
    logger.info("Registered user %s (id=%s)", user.username, user.id)
    return user


def authenticate(db: Session, email: str, password: str, user_type: str) -> Dict[str, Any]:
    """Check credentials against the user or admin table.

    Unknown email and wrong password raise the same AuthError so callers
    can't tell which one was wrong. No session or token is issued.
    """
    if not email or not password or not user_type:
        raise ValidationError("Email, password and userType are required")
    if user_type not in USER_TYPES:
        raise ValidationError("userType must be 'user' or 'admin'")

    model = Admin if user_type == "admin" else User
    try:
        account = db.query(model).filter(model.email == email).first()
    except SQLAlchemyError as e:
        logger.exception("Login lookup failed")
        raise StorageError("Login failed") from e

    if not account or not verify_password(password, account.password_hash):
        logger.info("Failed %s login attempt", user_type)
        raise AuthError(INVALID_CREDENTIALS)
    return {"firstName": account.first_name, "userType": user_type}


def seed_admin(db: Session) -> None:
    email = settings.admin_email
    password = settings.admin_password
    if not email or not password:
        return
    try:
        if db.query(Admin).filter(Admin.email == email).first():
            return
        db.add(Admin(
            first_name=settings.admin_first_name,
            email=email,
            password_hash=get_password_hash(password),
        ))
        db.commit()
        logger.info("Created admin: %s", email)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error seeding admin")
