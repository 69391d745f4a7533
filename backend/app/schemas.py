import re
from typing import Annotated, List, Optional

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    field_validator,
)
from pydantic.alias_generators import to_camel
from pydantic.networks import validate_email
from pydantic_core import PydanticCustomError

from app.models.cart import CartItem

PHONE_PATTERN = re.compile(r"^\+?[0-9]{7,15}$")


def _invalid(message: str) -> PydanticCustomError:
    # value_error keeps the message free of pydantic's "Value error, " prefix
    return PydanticCustomError("value_error", message)


def _check_email(value: str) -> str:
    try:
        validate_email(value)
    except PydanticCustomError:
        raise _invalid("Некорректный формат email")
    return value


def _check_username(value: str) -> str:
    if len(value) < 3:
        raise _invalid("Имя должно содержать минимум 3 символа")
    return value


def _check_new_password(value: str) -> str:
    if len(value) < 6:
        raise _invalid("Пароль должен содержать минимум 6 символов")
    return value


Username = Annotated[str, AfterValidator(_check_username)]
EmailAddress = Annotated[str, AfterValidator(_check_email)]
NewPassword = Annotated[str, AfterValidator(_check_new_password)]


# --- Shared ---
class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Auth ---
class RegisterRequest(BaseModel):
    username: Username
    email: EmailAddress
    password: NewPassword


class LoginRequest(BaseModel):
    email: EmailAddress
    password: str


class UserPublic(BaseModel):
    id: str
    username: str
    email: str

    class Config:
        from_attributes = True


class AuthUserResponse(BaseModel):
    user: UserPublic


class AuthCheckResponse(CamelModel):
    is_authenticated: bool
    user: Optional[UserPublic] = None


class MessageResponse(BaseModel):
    message: str


# --- Users ---
class UserProfile(CamelModel):
    id: str
    username: str
    email: str
    created_at: int


class UserUpdateRequest(BaseModel):
    username: Optional[Username] = None
    email: Optional[EmailAddress] = None


class PasswordChangeRequest(CamelModel):
    current_password: str
    new_password: NewPassword


# --- Cart ---
class AddCartItemRequest(CamelModel):
    product_id: str
    name: str
    price: StrictFloat = Field(..., gt=0, allow_inf_nan=False)
    image: str
    count: StrictInt = Field(default=1, ge=1)


class UpdateCountRequest(CamelModel):
    item_id: str
    count: StrictInt = Field(..., ge=0)


class CheckoutRequest(CamelModel):
    phone: str
    name: str
    address: str = Field(..., alias="adres")
    post_card: StrictBool
    post_card_text: str

    @field_validator("name")
    @classmethod
    def name_length(cls, v: str) -> str:
        if len(v) > 50:
            raise _invalid("Слишком длинное имя")
        return v


class CartResponse(BaseModel):
    items: List[CartItem]
    total: float
    count: int


class CartTotalResponse(BaseModel):
    total: float
    count: int


class SuccessResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None


class CheckoutResponse(CamelModel):
    success: bool = True
    message: str
    order_id: Optional[int] = None


# --- Admin ---
class AdminUserSummary(CamelModel):
    id: str
    username: str
    email: str
    created_at: int
    cart_items_count: int
    cart_total: float


class AdminUserList(BaseModel):
    users: List[AdminUserSummary]
    total: int


class AdminCheckResponse(CamelModel):
    is_admin: bool
    reason: Optional[str] = None
    user: Optional[UserPublic] = None


# --- Catalog ---
class RatingRequest(BaseModel):
    rating: float

    @field_validator("rating")
    @classmethod
    def rating_range(cls, v: float) -> float:
        if not 1 <= v <= 5:
            raise _invalid("Рейтинг должен быть числом от 1 до 5")
        return v


# --- Contact ---
class ContactRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: str
    message: str

    @field_validator("name")
    @classmethod
    def name_length(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and len(v) > 50:
            raise _invalid("Слишком длинное имя")
        return v

    @field_validator("email")
    @classmethod
    def email_format(cls, v: Optional[str]) -> Optional[str]:
        if v:
            return _check_email(v)
        return v

    @field_validator("phone")
    @classmethod
    def phone_format(cls, v: str) -> str:
        if not PHONE_PATTERN.match(v):
            raise _invalid("Неверный формат телефона")
        return v

    @field_validator("message")
    @classmethod
    def message_length(cls, v: str) -> str:
        if len(v) < 5:
            raise _invalid("Сообщение слишком короткое")
        if len(v) > 1000:
            raise _invalid("Сообщение слишком длинное")
        return v
