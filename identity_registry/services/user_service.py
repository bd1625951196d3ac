import logging
from typing import Any, Dict, List, Optional, Tuple
from sqlalchemy.orm import Session
from identity_registry.core.config import SEARCH_TERM_MAX_LENGTH
from identity_registry.core.exceptions import BadRequestError, ConflictError, NotFoundError
from identity_registry.models.user import User
from identity_registry.repositories.user_query import active_criteria, build_order_by, search_condition
from identity_registry.repositories.user_repository import UserRepository
from identity_registry.schemas.user_schema import UserResponse
from identity_registry.services.user_validator import validate_create, validate_update
from identity_registry.utils.masking import mask_user
from identity_registry.utils.pagination import parse_pagination_params, calculate_skip, generate_meta

logger = logging.getLogger(__name__)


class UserService:

    @staticmethod
    def create_user(db: Session, payload: Any) -> UserResponse:
        request = validate_create(payload)

        existing = UserRepository.find_by_unique_fields(
            db, request.email, request.aadhaar_number, request.pan_number
        )
        if existing:
            if existing.email == request.email:
                field = "email"
            elif existing.aadhaar_number == request.aadhaar_number:
                field = "aadhaar_number"
            else:
                field = "pan_number"
            logger.warning(f"Create rejected: {field} already registered")
            raise ConflictError(field)

        user = UserRepository.create_user(db, User(**request.model_dump()))
        logger.info(f"User created: id={user.id}")
        return mask_user(user)

    @staticmethod
    def update_user(db: Session, user_id: int, patch: Any) -> UserResponse:
        changes = validate_update(patch)

        user = UserRepository.get_by_id(db, user_id)
        if not user:
            raise NotFoundError()

        if not changes:
            return mask_user(user)

        new_email = changes.get("email")
        if new_email and new_email != user.email:
            if UserRepository.get_by_email(db, new_email, exclude_id=user.id):
                logger.warning(f"Update rejected for user_id={user_id}: email already registered")
                raise ConflictError("email")

        for field, value in changes.items():
            setattr(user, field, value)
        user = UserRepository.save(db, user)
        logger.info(f"User updated: id={user_id} fields={sorted(changes)} version={user.version}")
        return mask_user(user)

    @staticmethod
    def get_user(db: Session, user_id: int) -> UserResponse:
        user = UserRepository.get_by_id(db, user_id)
        if not user:
            raise NotFoundError()
        return mask_user(user)

    @staticmethod
    def list_users(
        db: Session,
        page=None,
        page_size=None,
        sort_field: Optional[str] = None,
        sort_direction: Optional[str] = None,
        criteria: Optional[dict] = None,
    ) -> Tuple[List[UserResponse], Dict[str, Any]]:
        page, page_size = parse_pagination_params(page, page_size)
        criteria = active_criteria(criteria)

        users = UserRepository.list_users(
            db, criteria, build_order_by(sort_field, sort_direction),
            calculate_skip(page, page_size), page_size,
        )
        total = UserRepository.count_users(db, criteria)
        return [mask_user(u) for u in users], generate_meta(page, page_size, total)

    @staticmethod
    def search_users(db: Session, term: Optional[str], page=None, page_size=None) -> Tuple[List[UserResponse], Dict[str, Any]]:
        if not isinstance(term, str) or not term.strip():
            raise BadRequestError("Search query is required", field="q")
        term = term.strip()
        if len(term) > SEARCH_TERM_MAX_LENGTH:
            raise BadRequestError(
                f"Search query cannot exceed {SEARCH_TERM_MAX_LENGTH} characters", field="q"
            )

        page, page_size = parse_pagination_params(page, page_size)
        criteria = active_criteria()
        conditions = [search_condition(term)]

        users = UserRepository.list_users(
            db, criteria, build_order_by(), calculate_skip(page, page_size), page_size,
            extra_conditions=conditions,
        )
        total = UserRepository.count_users(db, criteria, extra_conditions=conditions)
        return [mask_user(u) for u in users], generate_meta(page, page_size, total)

    @staticmethod
    def soft_delete_user(db: Session, user_id: int) -> None:
        UserRepository.soft_delete(db, user_id)
        logger.info(f"User soft-deleted: id={user_id}")
