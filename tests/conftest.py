"""
Pytest Fixtures for Perimeter Tests

Shared contracts, registries and data for engine, guard and loader tests.
"""

from enum import Enum
from pathlib import Path

import pytest

from contracts.builder import defcontract, list_of, optional, required
from contracts.registry import ContractRegistry


class Role(Enum):
    ADMIN = "admin"
    USER = "user"
    GUEST = "guest"


# =============================================================================
# PATH FIXTURES
# =============================================================================


@pytest.fixture
def project_root() -> Path:
    """Get project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def schemas_dir(project_root) -> Path:
    """Get contracts/schemas directory."""
    return project_root / "contracts" / "schemas"


# =============================================================================
# GLOBAL STATE
# =============================================================================


@pytest.fixture(autouse=True)
def clean_globals(monkeypatch, tmp_path):
    """Fresh process-wide registry and settings for every test."""
    import common.config as config_module
    import contracts.registry as registry_module

    for var in ("PERIMETER_GUARD_STRICT", "PERIMETER_LOG_LEVEL",
                "PERIMETER_LOG_DIR", "PERIMETER_CONTRACTS"):
        monkeypatch.delenv(var, raising=False)
    # Keep settings independent of the repository's config/ directory
    monkeypatch.setenv("PERIMETER_CONFIG_DIR", str(tmp_path / "no-config"))

    registry_module._registry = None
    config_module._settings = None
    yield
    registry_module._registry = None
    config_module._settings = None


# =============================================================================
# CONTRACT FIXTURES
# =============================================================================


@pytest.fixture
def user_contract():
    """email + age contract used throughout the examples."""
    return defcontract(
        "user",
        required("email", "string", format=r"@"),
        required("age", "integer", min=0),
    )


@pytest.fixture
def types_contract():
    """One required field per scalar/container type."""
    return defcontract(
        "types",
        required("string_field", "string"),
        required("integer_field", "integer"),
        required("float_field", "float"),
        required("boolean_field", "boolean"),
        required("atom_field", "atom"),
        required("map_field", "map"),
        required("list_field", "list"),
    )


@pytest.fixture
def nested_contract():
    """Contract with an optional nested address map."""
    return defcontract(
        "nested_user",
        required("email", "string"),
        optional("address", "map", fields=[
            required("city", "string"),
            required("zip", "string", format=r"^\d{5}$"),
            optional("state", "string"),
        ]),
    )


@pytest.fixture
def deep_contract():
    """Three levels of maps."""
    return defcontract(
        "deep",
        optional("profile", "map", fields=[
            optional("settings", "map", fields=[
                required("theme", "string"),
                required("notifications", "boolean"),
            ]),
        ]),
    )


@pytest.fixture
def list_contract():
    """Typed and optional typed lists."""
    return defcontract(
        "lists",
        required("tags", list_of("string")),
        required("counts", list_of("integer")),
        optional("flags", list_of("boolean")),
    )


@pytest.fixture
def registration_contract():
    """Registration params with a constrained optional profile."""
    return defcontract(
        "registration_params",
        required("email", "string", format=r"@"),
        required("password", "string", min_length=12),
        optional("profile", "map", fields=[
            optional("name", "string", max_length=100),
            optional("age", "integer", min=18, max=150),
            optional("bio", "string", max_length=500),
        ]),
    )


@pytest.fixture
def registry(user_contract, types_contract, nested_contract, deep_contract,
             list_contract, registration_contract) -> ContractRegistry:
    """Registry holding every fixture contract."""
    return ContractRegistry([
        user_contract,
        types_contract,
        nested_contract,
        deep_contract,
        list_contract,
        registration_contract,
    ])


# =============================================================================
# DATA FIXTURES
# =============================================================================


@pytest.fixture
def valid_types_data() -> dict:
    """Data satisfying the types contract."""
    return {
        "string_field": "hello",
        "integer_field": 42,
        "float_field": 3.14,
        "boolean_field": True,
        "atom_field": Role.ADMIN,
        "map_field": {},
        "list_field": [],
    }


@pytest.fixture
def contract_file(tmp_path) -> Path:
    """YAML definition file with nested and list fields."""
    path = tmp_path / "contracts.yaml"
    path.write_text(
        """
contracts:
  create_user:
    - {name: email, type: string, required: true, constraints: [{format: "@"}]}
    - {name: password, type: string, required: true, constraints: [{min_length: 12}]}
    - name: address
      type: map
      fields:
        - {name: city, type: string, required: true}
        - {name: zip, type: string, required: true, constraints: [{format: "^\\\\d{5}$"}]}
    - {name: tags, type: {list: string}}
    - {name: role, type: string, constraints: [{one_of: [admin, user]}]}
  ping:
    - {name: id, type: integer, required: true, constraints: [{min: 1}]}
""",
        encoding="utf-8",
    )
    return path
