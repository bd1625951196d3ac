from identity_registry.core.config import AADHAAR_MASK_PREFIX, PAN_MASK_PREFIX, MASK_VISIBLE_CHARS
from identity_registry.models.user import User
from identity_registry.schemas.user_schema import UserResponse


def mask_aadhaar(aadhaar_number: str) -> str:
    return AADHAAR_MASK_PREFIX + aadhaar_number[-MASK_VISIBLE_CHARS:]


def mask_pan(pan_number: str) -> str:
    return PAN_MASK_PREFIX + pan_number[-MASK_VISIBLE_CHARS:]


def mask_user(user: User) -> UserResponse:
    """Project a stored user into the only shape allowed to leave the core."""
    return UserResponse(
        id                = user.id,
        name              = user.name,
        email             = user.email,
        primary_mobile    = user.primary_mobile,
        secondary_mobile  = user.secondary_mobile,
        aadhaar_number    = mask_aadhaar(user.aadhaar_number),
        pan_number        = mask_pan(user.pan_number),
        date_of_birth     = user.date_of_birth,
        age               = user.calculate_age(),
        place_of_birth    = user.place_of_birth,
        current_address   = user.current_address,
        permanent_address = user.permanent_address,
        is_deleted        = user.is_deleted,
        created_by        = user.created_by,
        updated_by        = user.updated_by,
        version           = user.version,
        created_at        = user.created_at,
        updated_at        = user.updated_at,
    )
