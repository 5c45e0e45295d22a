from typing import Literal

ApplicationStatus = Literal["pending", "accepted", "rejected", "cancelled"]

PENDING = "pending"
ACCEPTED = "accepted"
REJECTED = "rejected"
CANCELLED = "cancelled"

TERMINAL_STATUSES = (ACCEPTED, REJECTED, CANCELLED)

# An application in one of these states blocks a new one for the same slot
LIVE_STATUSES = (PENDING, ACCEPTED)

# Denial messages per (operation, current status)
CANCEL_DENIALS = {
    ACCEPTED: "This application has been accepted and cannot be cancelled",
    REJECTED: "This application has been rejected and cannot be cancelled",
    CANCELLED: "This application has already been cancelled",
}

ACCEPT_DENIALS = {
    ACCEPTED: "This application has already been accepted",
    REJECTED: "This application has been rejected and cannot be accepted",
    CANCELLED: "This application has been cancelled and cannot be accepted",
}

REJECT_DENIALS = {
    REJECTED: "This application has already been rejected",
    ACCEPTED: "This application has been accepted and cannot be rejected",
    CANCELLED: "This application has been cancelled and cannot be rejected",
}
