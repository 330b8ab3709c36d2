import json
import textwrap
from pathlib import Path

import pytest

from setupsmith import document
from setupsmith.errors import MissingField, ParseFailed, SourceUnavailable, UnsupportedFormat
from setupsmith.types import DesiredState, OpaqueValue, PackageManagerKind, SequenceValue, StringValue

YAML_CONFIG = textwrap.dedent(
    """
    hostname: vm1
    package_manager: apt
    packages:
      - curl
      - git
    """
)


def write(tmp_path: Path, name: str, text: str) -> Path:
    path = tmp_path / name
    path.write_text(text)
    return path


def test_yaml_and_json_yield_same_state(tmp_path: Path) -> None:
    yaml_path = write(tmp_path, "host.yaml", YAML_CONFIG)
    json_path = write(
        tmp_path,
        "host.json",
        json.dumps({"hostname": "vm1", "package_manager": "apt", "packages": ["curl", "git"]}),
    )

    from_yaml = document.load(yaml_path)
    from_json = document.load(json_path)

    assert from_yaml == from_json
    assert from_yaml == DesiredState("vm1", "apt", ("curl", "git"))
    assert from_yaml.backend is PackageManagerKind.APT


def test_yml_and_uppercase_suffixes_are_yaml(tmp_path: Path) -> None:
    assert document.load(write(tmp_path, "host.yml", YAML_CONFIG)).hostname == "vm1"
    assert document.load(write(tmp_path, "HOST.YAML", YAML_CONFIG)).hostname == "vm1"


def test_unsupported_suffix(tmp_path: Path) -> None:
    path = write(tmp_path, "host.toml", 'hostname = "vm1"\n')
    with pytest.raises(UnsupportedFormat):
        document.load(path)


def test_unsupported_suffix_checked_before_reading(tmp_path: Path) -> None:
    with pytest.raises(UnsupportedFormat):
        document.load(tmp_path / "missing.txt")


def test_missing_source(tmp_path: Path) -> None:
    with pytest.raises(SourceUnavailable) as excinfo:
        document.load(tmp_path / "missing.yaml")
    assert "does not exist" in str(excinfo.value)


def test_malformed_yaml_reports_position(tmp_path: Path) -> None:
    path = write(tmp_path, "host.yaml", "hostname: [vm1\npackage_manager: apt\n")
    with pytest.raises(ParseFailed) as excinfo:
        document.load(path)
    assert str(path) in str(excinfo.value)


def test_malformed_json_reports_position(tmp_path: Path) -> None:
    path = write(tmp_path, "host.json", '{"hostname": "vm1",')
    with pytest.raises(ParseFailed) as excinfo:
        document.load(path)
    assert excinfo.value.detail.startswith("1:")


def test_top_level_must_be_mapping(tmp_path: Path) -> None:
    path = write(tmp_path, "host.json", '["vm1"]')
    with pytest.raises(ParseFailed):
        document.load(path)


@pytest.mark.parametrize(
    "data, field",
    [
        ({"package_manager": "apt", "packages": []}, "hostname"),
        ({"hostname": 42, "package_manager": "apt", "packages": []}, "hostname"),
        ({"hostname": "   ", "package_manager": "apt", "packages": []}, "hostname"),
        ({"hostname": "vm1", "packages": []}, "package_manager"),
        ({"hostname": "vm1", "package_manager": ["apt"], "packages": []}, "package_manager"),
        ({"hostname": "vm1", "package_manager": "apt"}, "packages"),
        ({"hostname": "vm1", "package_manager": "apt", "packages": "curl"}, "packages"),
        ({"hostname": "vm1", "package_manager": "apt", "packages": None}, "packages"),
    ],
)
def test_missing_or_invalid_fields(tmp_path: Path, data: dict, field: str) -> None:
    path = write(tmp_path, "host.json", json.dumps(data))
    with pytest.raises(MissingField) as excinfo:
        document.load(path)
    assert excinfo.value.field == field
    assert str(excinfo.value) == f"Missing or invalid '{field}'"


def test_empty_yaml_is_missing_hostname(tmp_path: Path) -> None:
    path = write(tmp_path, "host.yaml", "")
    with pytest.raises(MissingField) as excinfo:
        document.load(path)
    assert excinfo.value.field == "hostname"


def test_empty_package_list_is_valid(tmp_path: Path) -> None:
    path = write(tmp_path, "host.yaml", "hostname: vm1\npackage_manager: dnf\npackages: []\n")
    state = document.load(path)
    assert state.packages == ()


def test_non_string_packages_are_dropped(tmp_path: Path) -> None:
    yaml_path = write(
        tmp_path,
        "host.yaml",
        "hostname: vm1\npackage_manager: pacman\npackages: [curl, 3, null, {name: vim}, git]\n",
    )
    json_path = write(
        tmp_path,
        "host.json",
        json.dumps(
            {
                "hostname": "vm1",
                "package_manager": "pacman",
                "packages": ["curl", 3, None, {"name": "vim"}, "git"],
            }
        ),
    )
    assert document.load(yaml_path).packages == ("curl", "git")
    assert document.load(json_path).packages == ("curl", "git")


def test_unknown_package_manager_loads_without_backend(tmp_path: Path) -> None:
    path = write(tmp_path, "host.yaml", "hostname: vm1\npackage_manager: choco\npackages: [git]\n")
    state = document.load(path)
    assert state.package_manager == "choco"
    assert state.backend is None


def test_document_values_are_tagged_and_read_only(tmp_path: Path) -> None:
    path = write(
        tmp_path,
        "host.yaml",
        "hostname: vm1\npackage_manager: apt\npackages: [curl, 1]\nextra: true\n",
    )
    doc = document.load_document(path)

    assert doc["hostname"] == StringValue("vm1")
    assert doc["packages"] == SequenceValue((StringValue("curl"), OpaqueValue(1)))
    assert doc["extra"] == OpaqueValue(True)
    assert doc.string("packages") is None
    assert doc.strings("hostname") is None
    assert set(doc) == {"hostname", "package_manager", "packages", "extra"}
    with pytest.raises(TypeError):
        doc["hostname"] = StringValue("other")  # type: ignore[index]
