from flask import Blueprint
from app.version import API_PREFIX
from app.utils import auth_required, role_required

seller_bp = Blueprint("seller", __name__, url_prefix=f"{API_PREFIX}/seller")


@seller_bp.before_request
@auth_required
@role_required("fbo")
def _enforce_seller_role():
    """Ensure the requester is an authenticated food business operator."""
    return None

from . import products  # noqa: E402
from . import images  # noqa: E402
from . import orders  # noqa: E402
from . import dashboard  # noqa: E402
