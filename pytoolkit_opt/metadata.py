import tomllib
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import cast

from typing_extensions import NotRequired, ReadOnly, Required, TypedDict

DIST_NAME = "pytoolkit-opt"
PYPROJECT_PATH = Path(__file__).parent.parent / "pyproject.toml"


class ProjectInfo(TypedDict):
    """[project]セクションのうち参照する項目の型定義"""

    name: ReadOnly[Required[str]]
    version: ReadOnly[NotRequired[str]]
    description: ReadOnly[NotRequired[str]]
    requires_python: ReadOnly[NotRequired[str]]
    dependencies: ReadOnly[NotRequired[list[str]]]
    optional_dependencies: ReadOnly[NotRequired[dict[str, list[str]]]]


class PyProjectToml(TypedDict, total=False):
    """pyproject.tomlのうち参照する部分の型定義

    https://peps.python.org/pep-0621/
    """

    project: ReadOnly[Required[ProjectInfo]]


def get_package_metadata(path: Path = PYPROJECT_PATH) -> PyProjectToml:
    """Return the package metadata."""
    with path.open("rb") as f:
        data = tomllib.load(f)
    project = data.get("project", {})
    # PEP 621 keys use dashes
    for key in ("requires-python", "optional-dependencies"):
        if key in project:
            project[key.replace("-", "_")] = project.pop(key)
    return cast(PyProjectToml, data)


def get_installed_version(name: str = DIST_NAME) -> str:
    """Return the version of the installed distribution, or "unknown"."""
    try:
        return version(name)
    except PackageNotFoundError:
        return "unknown"


# A wheel install has no pyproject.toml next to the package
if PYPROJECT_PATH.exists():
    METADATA: PyProjectToml | None = get_package_metadata()
    NAME = METADATA["project"]["name"]
    VERSION = METADATA["project"].get("version", "unknown")
else:
    METADATA = None
    NAME = DIST_NAME
    VERSION = get_installed_version()
