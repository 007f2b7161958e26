"""
Contract Loader
Perimeter

Loads contracts declared as data (YAML or JSON) into a ContractRegistry.

The file is first checked against the JSON Schema in
``contracts/schemas/contract.json`` and then converted to models, so a bad
file is reported with the location of the problem rather than failing
somewhere in the engine.

    contracts:
      create_user:
        - {name: email, type: string, required: true, constraints: [{format: "@"}]}
        - name: address
          type: map
          fields:
            - {name: zip, type: string, required: true, constraints: [{format: "^\\d{5}$"}]}
        - {name: tags, type: {list: string}}
"""

import json
import logging
from pathlib import Path
from typing import Any

import yaml
from jsonschema import Draft202012Validator

from common.config import substitute_env
from contracts.builder import build_constraint, field_type_from, warn_inapplicable
from contracts.registry import ContractRegistry
from models.contract import Contract, ContractField, FieldType, ListOf

logger = logging.getLogger(__name__)

# Base path for bundled schemas
SCHEMAS_DIR = Path(__file__).parent / "schemas"
DEFINITION_SCHEMA = SCHEMAS_DIR / "contract.json"

_definition_validator: Draft202012Validator | None = None


class ContractDefinitionError(Exception):
    """Raised when a contract definition file or document is malformed."""

    def __init__(self, source: str, errors: list[str]):
        self.source = str(source)
        self.errors = errors

        error_summary = "; ".join(errors[:3])
        if len(errors) > 3:
            error_summary += f" ... and {len(errors) - 3} more"

        super().__init__(f"Invalid contract definition [{self.source}]: {error_summary}")


def _get_definition_validator() -> Draft202012Validator:
    """Get the cached validator for definition documents."""
    global _definition_validator
    if _definition_validator is None:
        with open(DEFINITION_SCHEMA, encoding="utf-8") as f:
            schema = json.load(f)
        Draft202012Validator.check_schema(schema)
        _definition_validator = Draft202012Validator(schema)
    return _definition_validator


def check_definition(document: Any, source: str = "<document>") -> None:
    """Raise ContractDefinitionError if ``document`` does not follow the file format."""
    errors = sorted(
        _get_definition_validator().iter_errors(document),
        key=lambda e: e.json_path,
    )
    if errors:
        raise ContractDefinitionError(source, [f"{e.json_path}: {e.message}" for e in errors])


def _type_from_definition(declared: Any) -> FieldType:
    if isinstance(declared, dict):
        return ListOf(item=_type_from_definition(declared["list"]))
    return field_type_from(declared)


def field_from_dict(entry: dict) -> ContractField:
    """Convert one field entry of a definition document."""
    constraints = []
    for item in entry.get("constraints", []):
        for keyword, value in item.items():
            constraints.append(build_constraint(keyword, value))

    nested = entry.get("fields")
    contract_field = ContractField(
        name=entry["name"],
        type=_type_from_definition(entry["type"]),
        required=entry.get("required", False),
        constraints=tuple(constraints),
        nested_fields=tuple(field_from_dict(n) for n in nested) if nested is not None else None,
    )
    warn_inapplicable(contract_field)
    return contract_field


def contract_from_dict(name: str, fields: list[dict]) -> Contract:
    """Convert one named contract of a definition document."""
    return Contract(name=name, fields=tuple(field_from_dict(entry) for entry in fields))


def load_document(document: Any, registry: ContractRegistry | None = None,
                  source: str = "<document>") -> ContractRegistry:
    """Check and convert an already parsed definition document."""
    check_definition(document, source)

    registry = registry if registry is not None else ContractRegistry()

    for name, fields in document["contracts"].items():
        try:
            registry.register(contract_from_dict(name, fields))
        except (ValueError, TypeError) as e:
            raise ContractDefinitionError(source, [f"contract {name}: {e}"]) from e

    return registry


def _read_document(path: Path) -> Any:
    with open(path, encoding="utf-8") as f:
        content = f.read()

    try:
        if path.suffix == ".json":
            return json.loads(content)
        return yaml.safe_load(substitute_env(content))
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ContractDefinitionError(str(path), [f"parse error: {e}"]) from e


def load_contracts(path: str | Path, registry: ContractRegistry | None = None) -> ContractRegistry:
    """
    Load every contract declared in a YAML or JSON file.

    Args:
        path: Definition file (.yaml, .yml or .json)
        registry: Registry to add to; a new one is created when omitted

    Returns:
        The registry holding the loaded contracts

    Raises:
        FileNotFoundError: If the file does not exist
        ContractDefinitionError: If the file is malformed
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Contract definition not found: {path}")

    document = _read_document(path)
    before = len(registry) if registry is not None else 0
    registry = load_document(document, registry, source=str(path))

    logger.info(f"Loaded {len(registry) - before} contract(s) from {path}")
    return registry
