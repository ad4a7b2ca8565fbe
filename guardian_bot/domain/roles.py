from enum import Enum

class Role(str, Enum):
    OWNER = "owner"
    TEACHER = "teacher"
    UNKNOWN = "unknown"

# roles allowed to send guardian notifications
NOTIFY_ROLES = (Role.OWNER.value, Role.TEACHER.value)
