import logging
from dataclasses import dataclass

from ..application.services.project_service import ProjectService
from ..application.services.task_service import TaskService
from ..application.use_cases.authenticate_user import AuthenticateUserUseCase
from ..application.use_cases.create_user import CreateUserUseCase
from ..application.use_cases.logout import LogoutUseCase
from ..application.use_cases.refresh_session import RefreshSessionUseCase
from ..infrastructure.persistence.sqlite import SQLiteDatabase
from ..infrastructure.repositories.project_repository import SQLiteProjectRepository
from ..infrastructure.repositories.task_repository import SQLiteTaskRepository
from ..infrastructure.repositories.user_repository import SQLiteUserRepository
from ..infrastructure.security.hashing import BcryptHashService
from ..infrastructure.security.revocation import InMemoryTokenRevocationStore
from ..infrastructure.security.tokens import JwtTokenService
from ..services.email_service import EmailService
from ..services.rate_limiter import FixedWindowRateLimiter
from .config import Settings

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ApplicationContainer:
    """Dependency registry shared across the FastAPI application lifecycle."""

    settings: Settings
    database: SQLiteDatabase
    user_repository: SQLiteUserRepository
    project_repository: SQLiteProjectRepository
    task_repository: SQLiteTaskRepository
    hash_service: BcryptHashService
    token_service: JwtTokenService
    email_service: EmailService
    auth_rate_limiter: FixedWindowRateLimiter
    create_user: CreateUserUseCase
    authenticate_user: AuthenticateUserUseCase
    refresh_session: RefreshSessionUseCase
    logout: LogoutUseCase
    project_service: ProjectService
    task_service: TaskService

    def close(self) -> None:
        self.database.close()


def build_container(settings: Settings) -> ApplicationContainer:
    if settings.uses_default_secrets:
        logger.warning("JWT secrets are using default values. Configure JWT_SECRET and JWT_REFRESH_SECRET in production.")

    database = SQLiteDatabase(settings.database_path)
    users = SQLiteUserRepository(database)
    projects = SQLiteProjectRepository(database)
    tasks = SQLiteTaskRepository(database)
    hash_service = BcryptHashService(settings.bcrypt_rounds)
    token_service = JwtTokenService(
        settings.jwt_secret,
        settings.jwt_refresh_secret,
        access_token_exp_minutes=settings.jwt_access_exp_minutes,
        refresh_token_exp_days=settings.jwt_refresh_exp_days,
        issuer=settings.jwt_issuer,
        audience=settings.jwt_audience,
        revocation_store=InMemoryTokenRevocationStore(),
    )
    email_service = EmailService(
        smtp_host=settings.smtp_host,
        smtp_port=settings.smtp_port,
        smtp_username=settings.smtp_username,
        smtp_password=settings.smtp_password,
        from_email=settings.smtp_from_email,
        frontend_base_url=settings.frontend_base_url,
    )

    return ApplicationContainer(
        settings=settings,
        database=database,
        user_repository=users,
        project_repository=projects,
        task_repository=tasks,
        hash_service=hash_service,
        token_service=token_service,
        email_service=email_service,
        auth_rate_limiter=FixedWindowRateLimiter(
            settings.auth_rate_limit_max,
            settings.auth_rate_limit_window_minutes * 60,
        ),
        create_user=CreateUserUseCase(users, hash_service, email_service),
        authenticate_user=AuthenticateUserUseCase(users, hash_service, token_service),
        refresh_session=RefreshSessionUseCase(users, token_service),
        logout=LogoutUseCase(token_service),
        project_service=ProjectService(projects, users),
        task_service=TaskService(tasks, projects, users),
    )
