"""Base job class for AMI copy stages."""

from abc import ABC, abstractmethod
from typing import Any, Optional
import boto3
import uuid
from ami_copy.core.aws import EC2Manager, KMSManager
from ami_copy.utils.logger import setup_logger
from ami_copy.utils.config import ConfigManager
from ami_copy.utils.session import SessionManager


class BaseJob(ABC):
    """Base class for all AMI copy stages."""

    # Class-level configuration cache
    _config_manager: Optional[ConfigManager] = None

    def __init__(
        self,
        config_manager: Optional[ConfigManager] = None,
        job_name: str = None,
        correlation_id: Optional[str] = None,
    ):
        """Initialize the job with configuration."""
        if config_manager is not None:
            self.config_manager = config_manager
        else:
            self.config_manager = self._get_or_create_config_manager()

        self.job_name = job_name or self.__class__.__name__.lower().replace("job", "")
        # Short correlation ID for tracking, shared by every stage of one run
        self.correlation_id = correlation_id or str(uuid.uuid4())[:8]

        self.logger = setup_logger(
            name=self.__class__.__module__,
            log_file=f"{self.job_name}.log",
            level=self.config_manager.get_logging_level(),
        )

    @classmethod
    def _get_or_create_config_manager(cls) -> ConfigManager:
        """Get or create a cached ConfigManager instance."""
        if cls._config_manager is None:
            cls._config_manager = ConfigManager()
        return cls._config_manager

    def log(self, message: str, level: str = "info") -> None:
        """Log with the run's correlation id prefix."""
        getattr(self.logger, level)(f"[{self.correlation_id}] {message}")

    def create_aws_session(self, profile: str, region: Optional[str] = None) -> "boto3.Session":
        """Create AWS session for a named profile."""
        self.log(f"Creating AWS session for profile {profile} in {region or 'default region'}", "debug")
        return SessionManager.get_profile_session(profile, region)

    def ec2(self, session: "boto3.Session", region: str) -> EC2Manager:
        return EC2Manager(session, region)

    def kms(self, session: "boto3.Session", region: str) -> KMSManager:
        return KMSManager(session, region)

    @abstractmethod
    def execute(self, **kwargs) -> Any:
        """Execute the job with given parameters."""
        pass
