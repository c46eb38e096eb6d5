"""Connector reading flex data bundled as static files.

Bundles live under <bundle_dir>/<reference as path>/changes/:
- flexibility-bundle.json: complete flex data response (object)
- changes-bundle.json: plain list of changes (older bundles)
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from .base import ALL_LAYERS, BaseConnector, ConnectorError
from .utils import empty_flex_data_response

logger = logging.getLogger(__name__)

FLEXIBILITY_BUNDLE = "flexibility-bundle.json"
CHANGES_BUNDLE = "changes-bundle.json"


class StaticFileConnector(BaseConnector):
    """Connector serving pre-built bundles from the file system."""

    _name = "static_file"
    layers = [ALL_LAYERS]

    def bundle_path(self, reference: str, bundle_dir: Path) -> Path:
        """Directory holding the bundles of a flex reference.

        Raises:
            ConnectorError: If the reference does not name a directory
                below bundle_dir
        """
        segments = reference.split(".")
        for segment in segments:
            if not segment or "/" in segment or "\\" in segment or ":" in segment:
                raise ConnectorError(
                    f"Invalid flex reference: {reference!r}",
                    connector_name=self.name,
                    details={"reference": reference},
                )
        return bundle_dir.joinpath(*segments, "changes")

    def _read_bundle(self, path: Path, expected: type) -> Any:
        try:
            with open(path, encoding="utf-8") as f:
                content = json.load(f)
        except (OSError, ValueError) as e:
            raise ConnectorError(f"Failed to read bundle {path}: {e}", connector_name=self.name)

        if not isinstance(content, expected):
            raise ConnectorError(
                f"Bundle {path} must hold a JSON {'object' if expected is dict else 'array'}",
                connector_name=self.name,
                details={"path": str(path), "type": type(content).__name__},
            )
        return content

    def _load(self, reference: str, bundle_dir: Path) -> Dict[str, Any]:
        result = empty_flex_data_response()
        directory = self.bundle_path(reference, bundle_dir)

        flexibility_bundle = directory / FLEXIBILITY_BUNDLE
        if flexibility_bundle.exists():
            result.update(self._read_bundle(flexibility_bundle, dict))
            return result

        changes_bundle = directory / CHANGES_BUNDLE
        if changes_bundle.exists():
            result["changes"] = self._read_bundle(changes_bundle, list)
            return result

        logger.debug("No static bundle for %s in %s", reference, directory)
        return result

    async def load_flex_data(self, reference: str, bundle_dir: Optional[Path] = None, **_: Any) -> Dict[str, Any]:
        """Load the bundled flex data of a reference.

        Args:
            reference: Flex reference, e.g. "my.app.Component"
            bundle_dir: Bundle root (defaults to config.static_bundle_dir)

        Returns:
            Flex data response; empty when no bundle exists

        Raises:
            ConnectorError: If the reference is not a dotted name, or a
                bundle exists but cannot be read or has the wrong shape
        """
        if bundle_dir is None:
            from flexconnect.config import config

            bundle_dir = config.static_bundle_dir

        return await asyncio.to_thread(self._load, reference, Path(bundle_dir))
