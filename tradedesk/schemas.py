from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictInt, field_validator

# Presence rules live in the store; these models only pin down JSON types and
# the camelCase wire names.


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, allow_inf_nan=False)

    @field_validator("*")
    @classmethod
    def _require_encodable_text(cls, value: Any) -> Any:
        if isinstance(value, str):
            try:
                value.encode("utf-8")
            except UnicodeEncodeError as exc:
                raise ValueError("text must be valid UTF-8") from exc
        return value


class UserCreateRequest(_WireModel):
    uid: str | None = None
    email: str | None = None
    name: str | None = None


class KycSubmitRequest(_WireModel):
    full_name: str | None = Field(default=None, alias="fullName")
    address: str | None = None
    city: str | None = None
    country: str | None = None
    id_number: str | None = Field(default=None, alias="idNumber")
    nic_front: str | None = Field(default=None, alias="nicFront")
    nic_back: str | None = Field(default=None, alias="nicBack")


class AccountCreateRequest(_WireModel):
    broker: str | None = None
    account_type: str | None = Field(default=None, alias="accountType")
    account_number: str | None = Field(default=None, alias="accountNumber")


class BotAssignmentCreateRequest(_WireModel):
    broker_account_id: StrictInt | None = Field(default=None, alias="brokerAccountId")
    bot_id: StrictInt | None = Field(default=None, alias="botId")
    signed_agreement_url: str | None = Field(default=None, alias="signedAgreementUrl")


class AdminBotCreateRequest(_WireModel):
    name: str | None = None
    price: int | float | None = None
    cost: int | float | None = None
    subscription_fee: int | float | None = Field(default=None, alias="subscriptionFee")


class AdminBotUpdateRequest(AdminBotCreateRequest):
    pass


class CareerApplicationRequest(_WireModel):
    name: str | None = None
    address: str | None = None
    nic: str | None = None
    phone: str | None = None
    whatsapp: str | None = None
    email: str | None = None
    currently_working: str | None = Field(default=None, alias="currentlyWorking")
    employment_type: str | None = Field(default=None, alias="employmentType")
    years_experience: str | int | float | None = Field(default=None, alias="yearsExperience")
    preferred_role: str | None = Field(default=None, alias="preferredRole")
    available_from: str | None = Field(default=None, alias="availableFrom")
    notes: str | None = None


def success_envelope(data: Any, trace_id: str, message: str = "ok") -> dict[str, Any]:
    return {
        "success": True,
        "data": data,
        "message": message,
        "meta": {
            "trace_id": trace_id,
        },
    }


def error_envelope(
    *,
    code: str,
    message: str,
    error_class: str,
    retryable: bool,
    trace_id: str,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    error: dict[str, Any] = {
        "code": code,
        "message": message,
        "retryable": retryable,
        "class": error_class,
    }
    if details is not None:
        error["details"] = details
    return {
        "success": False,
        "error": error,
        "meta": {
            "trace_id": trace_id,
        },
    }
