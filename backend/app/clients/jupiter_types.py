"""Jupiter swap API payloads.

Quote responses are sent back verbatim to the swap endpoint, so unknown
fields are kept (``extra="allow"``) and dumped with their camelCase names.
"""

import time
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr
from pydantic.alias_generators import to_camel


class PriorityLevel(str, Enum):
    """Jupiter priority fee level."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )


class SwapInfo(_CamelModel):
    label: str | None = None
    amm_key: str | None = None


class RoutePlan(_CamelModel):
    swap_info: SwapInfo = Field(default_factory=SwapInfo)


class QuoteResponse(_CamelModel):
    """Response of GET /quote."""

    input_mint: str
    output_mint: str
    in_amount: str
    out_amount: str
    route_plan: list[RoutePlan] = Field(default_factory=list)

    # Local receive time (monotonic seconds), never serialized
    _fetched_at: float = PrivateAttr(default_factory=time.monotonic)

    def age_ms(self, now: float | None = None) -> float:
        """Milliseconds since this quote was received."""
        current = time.monotonic() if now is None else now
        return (current - self._fetched_at) * 1000

    def to_payload(self) -> dict:
        """Quote as the swap endpoint expects it (camelCase, extras kept)."""
        return self.model_dump(by_alias=True, exclude_none=True)

    @property
    def route_labels(self) -> list[str]:
        return [r.swap_info.label for r in self.route_plan if r.swap_info.label]


class SwapResponse(_CamelModel):
    """Response of POST /swap."""

    swap_transaction: str  # base64 serialized VersionedTransaction
