from typing import Literal

ReportType = Literal["post", "comment", "project", "user", "chat", "application", "other"]
ReportReason = Literal["spam", "abuse", "harassment", "inappropriate content", "other"]
ReportState = Literal["pending", "resolved", "rejected", "cancelled"]
ActionTaken = Literal["none", "warning", "suspension", "ban", "content removal"]

REPORT_TYPES = ["post", "comment", "project", "user", "chat", "application", "other"]
REPORT_REASONS = ["spam", "abuse", "harassment", "inappropriate content", "other"]
REPORT_STATES = ["pending", "resolved", "rejected", "cancelled"]

# Report types that do not point at a stored document
UNTARGETED_TYPES = ("chat", "other")

# Collection holding the reported content, per report type
CONTENT_COLLECTIONS = {
    "post": "posts",
    "comment": "comments",
    "project": "projects",
    "user": "users",
    "application": "applications",
}
