"""
Pydantic request schemas.
"""

from auth_app.schemas.auth import *
from auth_app.schemas.user import *
