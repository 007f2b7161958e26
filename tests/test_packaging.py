"""
Tests for pyproject.toml - distribution metadata.
"""

import tomllib


class TestProjectMetadata:
    """Tests for the declared project metadata."""

    def test_readme_is_user_facing(self, project_root):
        project = tomllib.loads((project_root / "pyproject.toml").read_text())["project"]

        assert project["readme"] == "README.md"
        assert (project_root / "README.md").exists()

    def test_runtime_dependencies(self, project_root):
        project = tomllib.loads((project_root / "pyproject.toml").read_text())["project"]
        names = {dep.split(">")[0].split("=")[0].lower() for dep in project["dependencies"]}

        assert names == {"pydantic", "jsonschema", "pyyaml", "prometheus-client", "regex"}
