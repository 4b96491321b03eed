"""
Benefit Eligibility Verification Engine

Decides whether the holder of a verifiable credential qualifies for a
government benefit, computes the entitlement and keeps an append-only
audit trail of every verification.
"""

__version__ = "1.0.0"
__author__ = "Benefit Verification Team"
__description__ = "Credential-based eligibility and entitlement evaluation service"
