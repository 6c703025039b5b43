"""
Auth service pipelines.

Business logic orchestration functions.
"""

from auth_app.pipelines.auth import *
from auth_app.pipelines.user import *
