"""
CareerHub
A job-board backend with email-OTP gated registration.

Architecture:
- MongoDB: accounts, one-time passwords, seeker/recruiter profiles
- SMTP: OTP delivery
- JWT: session credentials for profile endpoints
"""

__version__ = "1.0.0"
