from typing import Literal, Optional
from pydantic import BaseModel, constr, field_validator, model_validator


class SignUpRequest(BaseModel):
    email: constr(strip_whitespace=True, to_lower=True, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    password: constr(min_length=6)
    confirm_password: str
    full_name: constr(strip_whitespace=True, min_length=1, max_length=100)
    phone: Optional[constr(strip_whitespace=True, max_length=20)] = None
    role: Literal["consumer", "fbo"] = "consumer"
    business_name: Optional[constr(strip_whitespace=True, max_length=150)] = None
    business_address: Optional[constr(strip_whitespace=True, max_length=255)] = None
    business_description: Optional[str] = None

    @model_validator(mode="after")
    def check_passwords_and_role(self):
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        if self.role == "fbo" and not self.business_name:
            raise ValueError("Business name is required for food business operators")
        return self


class SignInRequest(BaseModel):
    email: constr(strip_whitespace=True, to_lower=True, min_length=3)
    password: constr(min_length=1)


class RefreshRequest(BaseModel):
    refresh_token: constr(min_length=1)


class ChangePasswordRequest(BaseModel):
    current_password: constr(min_length=1)
    new_password: constr(min_length=6)
    confirm_password: str

    @field_validator("confirm_password")
    @classmethod
    def passwords_match(cls, v, info):
        if v != info.data.get("new_password"):
            raise ValueError("Passwords do not match")
        return v
