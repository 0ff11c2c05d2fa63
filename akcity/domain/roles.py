from enum import Enum


class UserRole(str, Enum):
    GENERAL_MANAGER = "general_manager"
    PROJECT_MANAGER = "project_manager"
    ARCHITECT = "architect"
    CHIEF_ENGINEER = "chief_engineer"
    DRIVER = "driver"
    WORKER = "worker"
    PURCHASING_MANAGER = "purchasing_manager"
    CLIENT = "client"
