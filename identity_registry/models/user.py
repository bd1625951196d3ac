from datetime import date, datetime, timezone
from sqlalchemy import Column, String, Date, DateTime, Boolean, Index, BigInteger, Integer, UniqueConstraint, event, inspect
from sqlalchemy.orm import column_property
from identity_registry.core.database import Base
from identity_registry.core.exceptions import ImmutableFieldError

IMMUTABLE_FIELDS = ("aadhaar_number", "pan_number")

# Priority order used when reporting a uniqueness conflict
UNIQUE_FIELDS = ("email", "aadhaar_number", "pan_number")


class User(Base):
    __tablename__ = "users"

    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    email = Column(String(254), nullable=False)
    primary_mobile = Column(String(10), nullable=False, index=True)
    secondary_mobile = Column(String(10), nullable=True)
    aadhaar_number = column_property(Column(String(12), nullable=False), active_history=True)
    pan_number = column_property(Column(String(10), nullable=False), active_history=True)
    date_of_birth = Column(Date, nullable=False)
    place_of_birth = Column(String(255), nullable=False)
    current_address = Column(String(500), nullable=False)
    permanent_address = Column(String(500), nullable=False)
    is_deleted = Column(Boolean, default=False, nullable=False, index=True)
    created_by = Column(String(100), nullable=True)
    updated_by = Column(String(100), nullable=True)
    version = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)

    __table_args__ = (
        UniqueConstraint("email", name="uq_users_email"),
        UniqueConstraint("aadhaar_number", name="uq_users_aadhaar_number"),
        UniqueConstraint("pan_number", name="uq_users_pan_number"),
        Index("idx_users_active_created", "is_deleted", "created_at"),
    )
    # the store bumps version itself; a stale version fails the UPDATE
    __mapper_args__ = {"version_id_col": version, "version_id_generator": False}

    def calculate_age(self, today: date = None) -> int:
        today = today or date.today()
        dob = self.date_of_birth
        return today.year - dob.year - ((today.month, today.day) < (dob.month, dob.day))


@event.listens_for(User, "before_update")
def _reject_identity_change(mapper, connection, target):
    state = inspect(target)
    for field in IMMUTABLE_FIELDS:
        history = state.attrs[field].history
        if history.deleted and history.added and history.deleted[0] != history.added[0]:
            raise ImmutableFieldError(f"{field} cannot be changed after creation", field=field)
