from typing import Optional
from pydantic import BaseModel, constr


class ProfileUpdateRequest(BaseModel):
    full_name: Optional[constr(strip_whitespace=True, min_length=1, max_length=100)] = None
    phone: Optional[constr(strip_whitespace=True, max_length=20)] = None
    business_name: Optional[constr(strip_whitespace=True, max_length=150)] = None
    business_address: Optional[constr(strip_whitespace=True, max_length=255)] = None
    business_description: Optional[str] = None
    avatar_url: Optional[constr(max_length=255)] = None
