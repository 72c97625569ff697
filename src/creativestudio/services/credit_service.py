"""User credit bookkeeping on the Firestore user profile documents."""

import logging
from typing import Any, Optional

from google.cloud import firestore
from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

USERS_COLLECTION = "users"


class UserProfile(BaseModel):
    """User document, keyed by email."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    email: str
    status: str = Field("pending", description="approved | pending | rejected")
    is_admin: bool = Field(False, alias="isAdmin")
    credits: int = Field(0)
    usage_count: int = Field(0, alias="usageCount")
    domain: Optional[str] = None
    is_internal_user: bool = Field(False, alias="isInternalUser")
    preferences: dict[str, Any] = Field(default_factory=dict)


class CreditService:
    """
    Reads profiles and adjusts credits with atomic field increments.

    Updates never read-modify-write, so concurrent batches cannot lose each
    other's decrements.
    """

    def __init__(self, db: Any | None = None, collection: str = USERS_COLLECTION):
        """
        Initialize credit service.

        Args:
            db: Firestore AsyncClient (created from ambient credentials when omitted)
            collection: Collection holding user profiles
        """
        self.db = db or firestore.AsyncClient()
        self.collection = collection

    def _doc(self, email: str):
        return self.db.collection(self.collection).document(email)

    async def get_profile(self, email: str) -> UserProfile | None:
        snapshot = await self._doc(email).get()
        if not snapshot.exists:
            return None
        return UserProfile.model_validate({"email": email, **(snapshot.to_dict() or {})})

    async def has_credits(self, email: str, required: int = 1) -> bool:
        profile = await self.get_profile(email)
        return profile is not None and profile.credits >= required

    async def decrement_credits(self, email: str, amount: int = 1) -> None:
        """Spend ``amount`` credits and count one usage."""
        await self._doc(email).update(
            {
                "credits": firestore.Increment(-amount),
                "usageCount": firestore.Increment(1),
            }
        )
        logger.info(f"💳 [CreditService] Charged {amount} credit(s) to {email}")

    async def add_credits(self, email: str, amount: int) -> None:
        if amount <= 0:
            raise ValueError("amount must be positive")
        await self._doc(email).update({"credits": firestore.Increment(amount)})
        logger.info(f"💳 [CreditService] Added {amount} credit(s) to {email}")
