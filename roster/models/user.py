"""User record models and the new-user validation schema."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, EmailStr, Field, HttpUrl, TypeAdapter, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from roster.errors import ValidationError

# Role menu offered by the UI. The stored role is an open set.
ROLES: tuple[str, ...] = (
    "Frontend",
    "Backend",
    "Fullstack",
    "UI/UX",
    "Product Manager",
    "Testing",
)

EDITABLE_FIELDS: tuple[str, ...] = ("first_name", "last_name", "email")

MIN_SALARY = 1000

_URL = TypeAdapter(HttpUrl)


class UserRecord(BaseModel):
    """One person in the users collection. Read leniently: other clients may write partial documents."""

    model_config = {"extra": "ignore"}

    id: str
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    avatar: str = ""
    role: str = ""
    salary: int | float = 0

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def fields(self) -> dict[str, Any]:
        """Field set without the id, as written to the store."""
        return self.model_dump(exclude={"id"})


class NewUser(BaseModel):
    """What the creation form submits. Strictly validated before any store call."""

    model_config = {"extra": "ignore"}

    first_name: str = Field(min_length=3)
    last_name: str
    email: EmailStr
    avatar: str
    role: str
    salary: float = Field(ge=MIN_SALARY, allow_inf_nan=False)

    @field_validator("avatar")
    @classmethod
    def _avatar_is_url(cls, value: str) -> str:
        try:
            _URL.validate_python(value)
        except PydanticValidationError as e:
            raise ValueError("Invalid URL") from e
        return value

    def to_fields(self) -> dict[str, Any]:
        """Field set for the store. Whole-number salaries are kept as integers."""
        data = self.model_dump()
        if float(self.salary).is_integer():
            data["salary"] = int(self.salary)
        return data


# Messages shown inline next to each creation form field.
_REQUIRED = {
    "first_name": "First Name is required",
    "last_name": "Last Name is required",
    "email": "Email is required",
    "avatar": "Avatar URL is required",
    "role": "Role is required",
    "salary": "Salary is required",
}

_INVALID = {
    "first_name": "min 3 char required",
    "last_name": "Last Name is required",
    "email": "Invalid email",
    "avatar": "Invalid URL",
    "role": "Role is required",
    "salary": "Salary must be a number",
}


def _message_for(field: str, error_type: str) -> str:
    if error_type == "missing":
        return _REQUIRED.get(field, "Required")
    if field == "salary" and error_type == "greater_than_equal":
        return f"min salary will be {MIN_SALARY}"
    return _INVALID.get(field, "Invalid value")


def validate_new_user(values: dict[str, Any]) -> NewUser:
    """
    Validate a creation form submission.

    Blank strings count as missing, the way an untouched form field does.

    Args:
        values: Raw form values (strings from HTML forms, or JSON values)

    Returns:
        Validated NewUser

    Raises:
        ValidationError: With one message per failing field
    """
    cleaned = {k: v for k, v in values.items() if not (v is None or (isinstance(v, str) and not v.strip()))}
    try:
        return NewUser.model_validate(cleaned)
    except PydanticValidationError as e:
        errors: dict[str, str] = {}
        for err in e.errors():
            field = str(err["loc"][0]) if err["loc"] else "form"
            errors.setdefault(field, _message_for(field, err["type"]))
        raise ValidationError(errors) from e


class SalaryAdjustment(BaseModel):
    """One step of the salary adjustment control."""

    model_config = {"extra": "forbid"}

    type: Literal["increment", "decrement", "set"]
    amount: float | None = Field(default=None, gt=0, allow_inf_nan=False)
    value: float | None = Field(default=None, ge=0, allow_inf_nan=False)

    @model_validator(mode="after")
    def _check_operand(self) -> SalaryAdjustment:
        if self.type == "set" and self.value is None:
            raise ValueError("set requires a value")
        if self.type != "set" and self.amount is None:
            raise ValueError(f"{self.type} requires a positive amount")
        return self


class EditUserRequest(BaseModel):
    """What the client sends to edit a user. Unset fields keep their persisted value."""

    model_config = {"extra": "forbid"}

    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    adjustments: list[SalaryAdjustment] = Field(default_factory=list)


class UserListResponse(BaseModel):
    """What the list endpoint returns: the filtered subset plus the filter inputs."""

    users: list[UserRecord]
    total: int
    search: str
    role: str
