import enum


class DeploymentEnvironment(enum.Enum):
    Production = "production"
    Development = "development"
    Staging = "staging"
    Test = "test"
    Local = "local"


class UserRole(enum.Enum):
    Normal = "normal"
    Admin = "admin"
    Super = "super"


class UserState(enum.Enum):
    Active = "active"
    Inactive = "inactive"


class MediaKind(enum.Enum):
    Image = "image"
    Video = "video"
    File = "file"
