"""Configuration and environment handling for flexconnect."""

import json
import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from flexconnect.connectors.base import ConfigurationError


class FlexServiceDeclaration(BaseModel):
    """One configured flexibility service (connector declaration).

    Example:
        {"connector": "LrepConnector", "url": "/sap/bc/lrep"}
        {"connector": "KeyUserConnector", "layers": ["CUSTOMER"], "url": "/keyuser"}
        {"connector": "my_pkg.connectors:MyConnector", "custom": true}
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    connector: str = Field(..., min_length=1)
    custom: bool = False
    layers: Optional[List[str]] = Field(
        default=None,
        validation_alias=AliasChoices("layers", "layerFilter"),
    )
    url: Optional[str] = None


def parse_flex_services(raw: Optional[str]) -> List[FlexServiceDeclaration]:
    """Parse the JSON list of service declarations.

    Raises:
        ConfigurationError: If the value is not a valid declaration list
    """
    if not raw or not raw.strip():
        return []

    try:
        entries = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"FLEX_SERVICES is not valid JSON: {e}")

    if not isinstance(entries, list):
        raise ConfigurationError("FLEX_SERVICES must be a JSON list of connector declarations")

    try:
        return [FlexServiceDeclaration.model_validate(entry) for entry in entries]
    except ValidationError as e:
        raise ConfigurationError(f"Invalid connector declaration in FLEX_SERVICES: {e}")


class Config:
    """Central configuration object."""

    def __init__(self):
        # Load .env file if it exists
        env_path = Path(__file__).parent.parent.parent / ".env"
        if env_path.exists():
            load_dotenv(env_path)

        # Get project root
        self.project_root = Path(__file__).parent.parent.parent

        # Configured connectors, in resolution order
        self.flex_services: List[FlexServiceDeclaration] = parse_flex_services(
            os.getenv("FLEX_SERVICES")
        )

        # Static flexibility bundles
        self.static_bundle_dir: Path = Path(
            os.getenv("FLEX_STATIC_BUNDLE_DIR", "bundles")
        )
        if not self.static_bundle_dir.is_absolute():
            self.static_bundle_dir = self.project_root / self.static_bundle_dir

        # Logging
        self.log_level: str = os.getenv("FLEX_LOG_LEVEL", "INFO")


# Global config instance
config = Config()
