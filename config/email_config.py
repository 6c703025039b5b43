"""
Email service configuration constants.

These are fixed values that don't change per environment.
Environment-specific values (API keys, hosts) come from settings.
"""

# Resend API endpoint
RESEND_API_URL = "https://api.resend.com/emails"

# Default values (can be overridden by settings)
EMAIL_DEFAULTS = {
    "mode": "console",
    "from_name": "Auth Service",
    "from_email": "noreply@example.com",
}

OTP_EMAIL_SUBJECT = "One-Time Password (OTP)"

OTP_EMAIL_TEXT = (
    "Your one-time password (OTP) is: {otp}. Please keep it secret and do not "
    "share it with anyone. This otp is only valid for {minutes} minutes."
)

OTP_EMAIL_HTML = """
<!DOCTYPE html>
<html>
<body style="margin: 0; padding: 24px; font-family: Arial, Helvetica, sans-serif; color: #333333;">
    <p>Your one-time password (OTP) is:</p>
    <p style="font-size: 28px; font-weight: 600; letter-spacing: 4px;">{otp}</p>
    <p>Please keep it secret and do not share it with anyone.
    This otp is only valid for {minutes} minutes.</p>
</body>
</html>
"""
