"""
Auth service business services.

Services are organized by domain:
- auth: OTP issuance/validation, per-device sessions
- user: Identity records
- email: OTP delivery
"""
