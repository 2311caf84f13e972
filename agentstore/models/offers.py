"""
Pydantic Offer Models

Implements the two purchasable offer variants an agent can present to a user,
plus the store item union used as the paymentRequest argument schema.

Descriptors are frozen snapshots: a prop change produces a new descriptor,
never an in-place mutation.
"""
from typing import Annotated, Any, Dict, Literal, Optional, Tuple, Union
from pydantic import BaseModel, Field, TypeAdapter, ValidationError, field_validator

from ..constants import CURRENCIES, INTERVALS
from ..exceptions import OfferValidationError


# ==================== Offer Variants ====================

class PaymentProps(BaseModel):
    """Fields of a one-off payment as the agent supplies them."""
    amount: float = Field(gt=0, description="Price in major currency units")
    currency: str
    name: str = Field(min_length=1)
    description: Optional[str] = None
    preview_url: Optional[str] = Field(None, alias="previewUrl")

    model_config = {
        "frozen": True,
        "extra": "forbid",
        "populate_by_name": True,
    }

    @field_validator("currency", mode="before")
    @classmethod
    def normalize_currency(cls, v):
        """Currency codes are matched case-insensitively and stored lowercase."""
        if isinstance(v, str):
            v = v.lower()
        if v not in CURRENCIES:
            raise ValueError(f"Unsupported currency {v!r}, expected one of {', '.join(CURRENCIES)}")
        return v

    def dependency_tuple(self) -> Tuple[Any, ...]:
        """Fields whose change re-registers the offer and raises an epoch."""
        return (
            self.amount,
            self.currency,
            self.name,
            self.description,
            self.preview_url,
        )


class SubscriptionProps(PaymentProps):
    """Fields of a recurring charge every interval_count intervals."""
    interval: str
    interval_count: int = Field(1, ge=1, alias="intervalCount")

    @field_validator("interval")
    @classmethod
    def known_interval(cls, v: str):
        if v not in INTERVALS:
            raise ValueError(f"Unsupported interval {v!r}, expected one of {', '.join(INTERVALS)}")
        return v

    def dependency_tuple(self) -> Tuple[Any, ...]:
        return super().dependency_tuple() + (self.interval, self.interval_count)


class PaymentOffer(PaymentProps):
    """One-off payment for a single item."""
    kind: Literal["payment"] = "payment"


class SubscriptionOffer(SubscriptionProps):
    """Recurring subscription offer."""
    kind: Literal["subscription"] = "subscription"


OfferDescriptor = Union[PaymentOffer, SubscriptionOffer]


def build_offer(kind: str, **fields) -> OfferDescriptor:
    """
    Build a validated offer descriptor from prop fields.

    Args:
        kind: "payment" or "subscription"
        **fields: Offer fields, snake_case or the camelCase prop names

    Returns:
        Frozen PaymentOffer or SubscriptionOffer

    Raises:
        OfferValidationError: unknown kind or invalid field values
    """
    model = {"payment": PaymentOffer, "subscription": SubscriptionOffer}.get(kind)
    if model is None:
        raise OfferValidationError(f"Unknown offer kind: {kind}", {"kind": kind})

    try:
        return model(**fields)
    except ValidationError as e:
        raise OfferValidationError(
            f"Invalid {kind} offer: {e.error_count()} validation error(s)",
            {"errors": e.errors(include_url=False, include_context=False)}
        ) from e


# ==================== Store Item Schema ====================

class PaymentItem(BaseModel):
    """paymentRequest argument for a one-off payment."""
    type: Literal["payment"]
    props: PaymentProps


class SubscriptionItem(BaseModel):
    """paymentRequest argument for a subscription."""
    type: Literal["subscription"]
    props: SubscriptionProps


StoreItem = Annotated[Union[PaymentItem, SubscriptionItem], Field(discriminator="type")]

_store_item_adapter = TypeAdapter(StoreItem)


def validate_store_item(data: Dict[str, Any]) -> Union[PaymentItem, SubscriptionItem]:
    """Parse a paymentRequest argument payload."""
    return _store_item_adapter.validate_python(data)


def store_item_schema() -> Dict[str, Any]:
    """JSON schema of the paymentRequest argument, as declared to the agent."""
    return _store_item_adapter.json_schema(by_alias=True)
