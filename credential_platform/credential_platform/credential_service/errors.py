"""
Failure taxonomy for the authentication core.

Token verification failures are kept distinct internally and collapse into a
single ``Reason.INVALID_TOKEN`` rejection at the request boundary. Every
``Rejected`` carries one fixed HTTP status and message.
"""
from enum import Enum


class VerificationFailure(Exception):
    """A presented token could not be accepted"""


class MalformedToken(VerificationFailure):
    pass


class UnexpectedAlgorithm(VerificationFailure):
    pass


class BadSignature(VerificationFailure):
    pass


class Expired(VerificationFailure):
    pass


class MissingIdentity(VerificationFailure):
    pass


class HashingFailure(Exception):
    pass


class IssuanceFailure(Exception):
    pass


class InsertionFailure(Exception):
    pass


class LookupFailure(Exception):
    pass


class Reason(str, Enum):
    NO_TOKEN = "no_token"
    BAD_SCHEME = "bad_scheme"
    INVALID_TOKEN = "invalid_token"
    MISSING_FIELD = "missing_field"
    NOT_FOUND = "not_found"
    BAD_PASSWORD = "bad_password"
    INSERTION_FAILURE = "insertion_failure"
    HASHING_FAILURE = "hashing_failure"
    LOOKUP_FAILURE = "lookup_failure"
    ISSUANCE_FAILURE = "issuance_failure"


# reason -> (status code, message)
OUTCOMES = {
    Reason.NO_TOKEN: (401, "Token not provided"),
    Reason.BAD_SCHEME: (401, "Malformed Authorization header"),
    Reason.INVALID_TOKEN: (401, "Invalid token"),
    Reason.MISSING_FIELD: (400, "Email and password are required"),
    Reason.NOT_FOUND: (401, "User not found"),
    Reason.BAD_PASSWORD: (401, "Incorrect password"),
    Reason.INSERTION_FAILURE: (500, "Error inserting user"),
    Reason.HASHING_FAILURE: (500, "Error hashing password"),
    Reason.LOOKUP_FAILURE: (500, "Error fetching user"),
    Reason.ISSUANCE_FAILURE: (500, "Failed to generate token"),
}


class Rejected(Exception):
    """Terminal, caller-visible outcome of an authentication operation."""

    def __init__(self, reason: Reason):
        self.reason = reason
        self.status_code, self.message = OUTCOMES[reason]
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"Rejected({self.reason.name})"
