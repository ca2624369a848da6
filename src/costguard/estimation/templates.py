"""CloudFormation template loading.

YAML templates may use the intrinsic-function short forms (``!Ref``,
``!Sub``, ``!GetAtt`` ...); these are expanded to their long JSON form so
the rest of the package only ever sees plain dictionaries.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

import yaml

from ..exceptions import TemplateError

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE_NAMES: Sequence[str] = ("template.yaml", "template.yml", "template.json")


class CloudFormationLoader(yaml.SafeLoader):
    """SafeLoader that understands CloudFormation short-form tags."""


def _construct_intrinsic(loader: yaml.SafeLoader, tag_suffix: str, node: yaml.Node) -> Dict[str, Any]:
    if isinstance(node, yaml.ScalarNode):
        value: Any = loader.construct_scalar(node)
    elif isinstance(node, yaml.SequenceNode):
        value = loader.construct_sequence(node, deep=True)
    else:
        value = loader.construct_mapping(node, deep=True)

    if tag_suffix == "Ref":
        return {"Ref": value}
    if tag_suffix == "GetAtt" and isinstance(value, str):
        value = value.split(".", 1)
    return {f"Fn::{tag_suffix}": value}


CloudFormationLoader.add_multi_constructor("!", _construct_intrinsic)


def parse_template(text: str, name: str = "<template>") -> Dict[str, Any]:
    """Parse template text as JSON, falling back to CloudFormation YAML."""
    try:
        data = json.loads(text)
    except ValueError:
        try:
            data = yaml.load(text, Loader=CloudFormationLoader)
        except yaml.YAMLError as e:
            raise TemplateError(f"Template is neither valid JSON nor YAML: {e}", template_path=name) from e

    if not isinstance(data, dict):
        raise TemplateError("Template root must be a mapping", template_path=name)
    resources = data.get("Resources", {})
    if resources is not None and not isinstance(resources, dict):
        raise TemplateError("Template Resources must be a mapping", template_path=name)
    return data


def load_template(path: str | Path) -> Dict[str, Any]:
    """Load a CloudFormation template from disk.

    Raises:
        TemplateError: If the file is missing or malformed
    """
    template_path = Path(path)
    try:
        text = template_path.read_text(encoding="utf-8")
    except OSError as e:
        raise TemplateError(f"Template file not found: {template_path}", template_path=str(template_path)) from e
    logger.debug(f"Loaded template {template_path} ({len(text)} bytes)")
    return parse_template(text, str(template_path))


def find_default_template(root: str | Path = ".") -> Optional[Path]:
    """Return the first conventional template file present in ``root``."""
    for name in DEFAULT_TEMPLATE_NAMES:
        candidate = Path(root) / name
        if candidate.is_file():
            return candidate
    return None
