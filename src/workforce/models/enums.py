"""Shared enums for models and settings."""

from enum import Enum


class ServiceName(str, Enum):
    """Independently deployed record service."""

    EMPLOYEE = "employee"
    DEPARTMENT = "department"
    PROJECT = "project"


class ProjectStatus(str, Enum):
    """Project lifecycle status."""

    PLANNED = "PLANNED"
    ACTIVE = "ACTIVE"
    ON_HOLD = "ON_HOLD"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class OnRemoteFailure(str, Enum):
    """What a call site does when a remote service cannot be reached.

    BLOCK: surface RemoteUnavailable to the caller.
    PROCEED: continue as if the check had passed.
    TREAT_AS_ABSENT: continue as if the remote entity (or dependent) does not exist.
    """

    BLOCK = "block"
    PROCEED = "proceed"
    TREAT_AS_ABSENT = "treat_as_absent"
