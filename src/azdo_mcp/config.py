"""Environment configuration for the Azure DevOps MCP server."""
import os
import sys
import logging
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, SecretStr, field_validator

logger = logging.getLogger("azdo-mcp.config")

# Load .env from the working directory; real environment variables take precedence
load_dotenv()

AZURE_DEVOPS_ORG_URL = os.getenv("AZURE_DEVOPS_ORG_URL")
AZURE_DEVOPS_PAT = os.getenv("AZURE_DEVOPS_PAT")
AZURE_DEVOPS_API_VERSION = os.getenv("AZURE_DEVOPS_API_VERSION", "7.1")
AZURE_DEVOPS_TIMEOUT = float(os.getenv("AZURE_DEVOPS_TIMEOUT", "30"))
AZURE_DEVOPS_LOG_LEVEL = os.getenv("AZURE_DEVOPS_LOG_LEVEL", "INFO")


class AdoSettings(BaseModel):
    """Connection settings for one Azure DevOps organization or collection."""

    org_url: str
    pat: SecretStr
    api_version: str = "7.1"
    timeout: float = 30.0

    @field_validator("org_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


def load_settings(
    org_url: Optional[str] = None,
    pat: Optional[str] = None,
) -> AdoSettings:
    """Build settings from explicit values, falling back to the environment."""
    return AdoSettings(
        org_url=org_url or AZURE_DEVOPS_ORG_URL or "",
        pat=pat or AZURE_DEVOPS_PAT or "",
        api_version=AZURE_DEVOPS_API_VERSION,
        timeout=AZURE_DEVOPS_TIMEOUT,
    )


def validate_config() -> None:
    """Exit with status 1 unless both required variables are set."""
    if not AZURE_DEVOPS_ORG_URL or not AZURE_DEVOPS_PAT:
        logger.error(
            "Error: AZURE_DEVOPS_ORG_URL and AZURE_DEVOPS_PAT must be set in environment variables"
        )
        sys.exit(1)
