"""
User Service - the credential store.

One document per user in the ``users`` collection holds identity
(email + bcrypt hash) and the candidate profile. This module owns:
- password hashing / verification
- registration (duplicate email -> conflict)
- lookups by email / id (hash excluded unless asked for)
- the allow-listed profile update path

Cross-field profile rules are checked here, against the merged record,
so registration and profile updates enforce exactly the same rules.
"""

import logging
from datetime import date, datetime, time, timezone
from typing import Any, Dict, Iterable, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from passlib.context import CryptContext
from pymongo import ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError

from talent_portal.core.exceptions import (
    DuplicateEmailError,
    FieldError,
    UserNotFound,
    ValidationFailed,
)
from talent_portal.schemas.schemas import MAX_PASSWORD_BYTES

logger = logging.getLogger(__name__)

PASSWORD_FIELD = "passwordHash"

# Fields the profile update path may touch; email and the password hash
# are not among them.
MUTABLE_FIELDS = (
    "name",
    "designation",
    "firstName",
    "lastName",
    "country",
    "phone",
    "gender",
    "dob",
    "totalExperience",
    "currentCTC",
    "expectedCTC",
    "noticePeriod",
    "noticePeriodDays",
    "bio",
    "skills",
    "experience",
    "resumeUrl",
    "avatar",
)

REQUIRED_PROFILE_FIELDS = {
    "designation": "Designation is required",
    "firstName": "First name is required",
    "lastName": "Last name is required",
    "country": "Country is required",
    "gender": "Gender is required",
    "dob": "Date of birth is required",
    "totalExperience": "Total experience is required",
    "currentCTC": "Current CTC is required",
    "expectedCTC": "Expected CTC is required",
    "noticePeriod": "Notice period status is required",
}


# ============================================================
# HELPERS
# ============================================================

def build_pwd_context(rounds: int = 12) -> CryptContext:
    """bcrypt with a random per-hash salt; ``rounds`` is the log2 cost."""
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_object_id(user_id: Any) -> Optional[ObjectId]:
    if isinstance(user_id, ObjectId):
        return user_id
    try:
        return ObjectId(str(user_id))
    except (InvalidId, TypeError):
        return None


def _dob_to_storage(value: Any) -> Any:
    # BSON has no date type; store midnight UTC
    if isinstance(value, str):
        value = date.fromisoformat(value)
    if isinstance(value, date) and not isinstance(value, datetime):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    return value


def serialize_user(doc: Optional[dict]) -> Optional[dict]:
    """Convert a user document to a JSON-friendly dict without the hash."""
    if doc is None:
        return None
    out = {key: value for key, value in doc.items() if key != PASSWORD_FIELD}
    out["_id"] = str(out["_id"])
    if isinstance(out.get("dob"), datetime):
        out["dob"] = out["dob"].date()
    return out


def validate_profile_rules(record: Dict[str, Any]) -> List[FieldError]:
    """
    Rules that need more than one field. ``record`` is the full view of the
    user (stored values overlaid with incoming ones).
    """
    errors: List[FieldError] = []

    for field, message in REQUIRED_PROFILE_FIELDS.items():
        if record.get(field) is None:
            errors.append(FieldError(field, message))

    current, expected = record.get("currentCTC"), record.get("expectedCTC")
    if current is not None and expected is not None and expected < current:
        errors.append(FieldError("expectedCTC", "Expected CTC must be greater than or equal to current CTC"))

    if record.get("noticePeriod") == "Yes" and record.get("noticePeriodDays") is None:
        errors.append(
            FieldError("noticePeriodDays", "Notice period days is required when notice period is Yes")
        )

    return errors


def _too_long_for_bcrypt(password: str) -> bool:
    # bcrypt silently drops input past 72 bytes
    return len(password.encode("utf-8")) > MAX_PASSWORD_BYTES


def _only(fields: Dict[str, Any], allowed: Iterable[str]) -> Dict[str, Any]:
    allowed = set(allowed)
    return {key: value for key, value in fields.items() if key in allowed}


# ============================================================
# CREDENTIAL STORE
# ============================================================

class CredentialStore:
    """
    Handles user documents: registration, lookups, password checks and
    self-service profile updates.
    """

    def __init__(self, collection: Collection, pwd_context: Optional[CryptContext] = None):
        self.collection = collection
        self.pwd_context = pwd_context or build_pwd_context()

    # -------------------- passwords --------------------

    def hash_password(self, password: str) -> str:
        if _too_long_for_bcrypt(password):
            raise ValidationFailed(
                [FieldError("password", f"Password must be at most {MAX_PASSWORD_BYTES} bytes long")]
            )
        return self.pwd_context.hash(password)

    def verify_password(self, record: Optional[dict], candidate: str) -> bool:
        """
        Check ``candidate`` against the record's stored hash.
        Returns False (never raises) for a mismatch or a missing/garbled hash.
        """
        hashed = (record or {}).get(PASSWORD_FIELD)
        if not hashed or not candidate or _too_long_for_bcrypt(candidate):
            return False
        try:
            return self.pwd_context.verify(candidate, hashed)
        except ValueError:
            # unrecognised hash format
            return False

    # -------------------- lookups --------------------

    def _projection(self, include_password: bool) -> Optional[dict]:
        return None if include_password else {PASSWORD_FIELD: 0}

    def find_by_email(self, email: str, include_password: bool = False) -> Optional[dict]:
        if not email:
            return None
        return self.collection.find_one(
            {"email": email.strip().lower()}, self._projection(include_password)
        )

    def find_by_id(self, user_id: Any, include_password: bool = False) -> Optional[dict]:
        oid = to_object_id(user_id)
        if oid is None:
            return None
        return self.collection.find_one({"_id": oid}, self._projection(include_password))

    # -------------------- registration / login --------------------

    def register(self, fields: Dict[str, Any], password: str) -> dict:
        """
        Insert a new user.

        Args:
            fields: validated profile + email, keyed as stored (camelCase)
            password: plaintext; only its bcrypt hash is stored

        Returns:
            The stored document without the hash.
        """
        email = fields["email"].strip().lower()

        if self.find_by_email(email):
            logger.info("Registration rejected: email already registered")
            raise DuplicateEmailError()

        errors = validate_profile_rules(fields)
        if errors:
            raise ValidationFailed(errors)

        now = utcnow()
        doc = dict(fields)
        doc.update(
            {
                "email": email,
                PASSWORD_FIELD: self.hash_password(password),
                "isEmailVerified": False,
                "skills": fields.get("skills") or [],
                "createdAt": now,
                "updatedAt": now,
            }
        )
        if "dob" in doc:
            doc["dob"] = _dob_to_storage(doc["dob"])

        try:
            result = self.collection.insert_one(doc)
        except DuplicateKeyError:
            # lost a race with a concurrent registration for the same email
            logger.info("Registration rejected by unique index")
            raise DuplicateEmailError()

        logger.info("Registered user %s", result.inserted_id)
        return self.find_by_id(result.inserted_id)

    def authenticate(self, email: str, password: str) -> Optional[dict]:
        """
        Return the user (without hash) when email and password match, else None.
        Unknown email and wrong password are indistinguishable to the caller.
        """
        record = self.find_by_email(email, include_password=True)
        if record is None:
            # same bcrypt cost as the wrong-password path
            self.pwd_context.dummy_verify()
            return None
        if not self.verify_password(record, password):
            return None
        record.pop(PASSWORD_FIELD, None)
        return record

    # -------------------- profile --------------------

    def update_fields(self, user_id: Any, partial_fields: Dict[str, Any]) -> dict:
        """
        Apply an allow-listed partial update and return the updated record.

        The merged record (stored + incoming) is re-checked with the same
        rules as registration before anything is written.
        """
        current = self.find_by_id(user_id)
        if current is None:
            raise UserNotFound()

        updates = _only(partial_fields, MUTABLE_FIELDS)
        if "dob" in updates and updates["dob"] is not None:
            updates["dob"] = _dob_to_storage(updates["dob"])

        merged = {**current, **updates}
        errors = validate_profile_rules(merged)
        if errors:
            raise ValidationFailed(errors)

        updates["updatedAt"] = utcnow()
        updated = self.collection.find_one_and_update(
            {"_id": current["_id"]},
            {"$set": updates},
            projection={PASSWORD_FIELD: 0},
            return_document=ReturnDocument.AFTER,
        )
        if updated is None:
            raise UserNotFound()

        logger.info("Updated profile %s (%s)", current["_id"], ", ".join(sorted(updates)))
        return updated
