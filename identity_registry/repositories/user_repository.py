import logging
from datetime import datetime, timezone
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError
from identity_registry.core.config import MAX_DB_INT
from identity_registry.core.exceptions import ConflictError, ImmutableFieldError, NotFoundError
from identity_registry.models.user import User, UNIQUE_FIELDS
from identity_registry.repositories.user_query import active_criteria, build_conditions
from typing import Optional, List

logger = logging.getLogger(__name__)


UNIQUE_VIOLATION_MARKERS = ("unique constraint", "duplicate key", "duplicate entry")


def _conflict_from_integrity_error(error: IntegrityError) -> Optional[ConflictError]:
    """Map a unique-index violation to a ConflictError naming the field.

    Returns None for any other integrity failure (NOT NULL, CHECK, foreign key)
    so the caller can re-raise it untouched.
    """
    message = str(error.orig).lower()
    if getattr(error.orig, "pgcode", None) != "23505" and not any(m in message for m in UNIQUE_VIOLATION_MARKERS):
        return None
    # SQLite reports "users.<column>", PostgreSQL the "uq_users_<column>" constraint
    for field in UNIQUE_FIELDS:
        if field in message:
            return ConflictError(field)
    return None


class UserRepository:

    @staticmethod
    def get_by_id(db: Session, user_id: int, include_deleted: bool = False) -> Optional[User]:
        if not 0 < user_id <= MAX_DB_INT:
            return None
        query = db.query(User).filter(User.id == user_id)
        if not include_deleted:
            query = query.filter(*build_conditions(active_criteria()))
        return query.first()

    @staticmethod
    def get_by_email(db: Session, email: str, exclude_id: Optional[int] = None) -> Optional[User]:
        query = db.query(User).filter(User.email == email)
        if exclude_id is not None:
            query = query.filter(User.id != exclude_id)
        return query.first()

    @staticmethod
    def find_by_unique_fields(db: Session, email: str, aadhaar_number: str, pan_number: str) -> Optional[User]:
        return db.query(User).filter(
            or_(
                User.email == email,
                User.aadhaar_number == aadhaar_number,
                User.pan_number == pan_number,
            )
        ).order_by(User.id.asc()).first()

    @staticmethod
    def create_user(db: Session, user: User) -> User:
        now = datetime.now(timezone.utc)
        user.version = 0
        user.is_deleted = False
        user.created_at = now
        user.updated_at = now
        db.add(user)
        UserRepository._commit(db)
        db.refresh(user)
        return user

    @staticmethod
    def save(db: Session, user: User) -> User:
        user_id = user.id
        user.version = (user.version or 0) + 1
        user.updated_at = datetime.now(timezone.utc)
        UserRepository._commit(db, user_id)
        db.refresh(user)
        return user

    @staticmethod
    def soft_delete(db: Session, user_id: int) -> User:
        user = UserRepository.get_by_id(db, user_id)
        if not user:
            raise NotFoundError()
        user.is_deleted = True
        return UserRepository.save(db, user)

    @staticmethod
    def list_users(db: Session, criteria: dict, order_by: List, skip: int, limit: int, extra_conditions: Optional[List] = None) -> List[User]:
        return db.query(User).filter(
            *build_conditions(criteria), *(extra_conditions or [])
        ).order_by(*order_by).offset(skip).limit(limit).all()

    @staticmethod
    def count_users(db: Session, criteria: dict, extra_conditions: Optional[List] = None) -> int:
        return db.query(User).filter(*build_conditions(criteria), *(extra_conditions or [])).count()

    @staticmethod
    def _commit(db: Session, user_id: Optional[int] = None) -> None:
        try:
            db.commit()
        except StaleDataError as e:
            db.rollback()
            current = UserRepository.get_by_id(db, user_id) if user_id is not None else None
            if not current:
                raise NotFoundError() from e
            logger.warning(f"Concurrent write rejected: id={user_id} stored version={current.version}")
            raise ConflictError("version", "User was modified concurrently") from e
        except IntegrityError as e:
            db.rollback()
            conflict = _conflict_from_integrity_error(e)
            if conflict is None:
                raise
            logger.warning(f"Unique index rejected write on {conflict.field}")
            raise conflict from e
        except ImmutableFieldError:
            db.rollback()
            raise
