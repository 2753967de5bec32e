from dataclasses import asdict, dataclass

from app.services import cart as cart_service
from app.services import favorites as favorites_service
from models.profile import Profile


@dataclass
class SessionContext:
    """What the client needs to render the signed-in chrome.

    Rebuilt from the store on every request, never cached server-side.
    """

    user_id: int
    email: str
    full_name: str
    role: str
    display_name: str
    cart_count: int
    favorites_count: int

    def to_dict(self):
        return asdict(self)


def build(profile: Profile) -> SessionContext:
    is_consumer = profile.role == "consumer"
    return SessionContext(
        user_id=profile.id,
        email=profile.email,
        full_name=profile.full_name,
        role=profile.role,
        display_name=profile.display_name,
        cart_count=cart_service.count(profile.id) if is_consumer else 0,
        favorites_count=favorites_service.count(profile.id) if is_consumer else 0,
    )
