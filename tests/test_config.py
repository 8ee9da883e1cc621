"""Tests for listener configuration files and the import helper."""

from __future__ import annotations

from pathlib import Path

import pytest

from evd_core.config import CONFIG_ENV_VAR, CONFIG_FILE_NAME, ListenerConfig, default_config_path
from evd_core.container import create_dispatcher
from evd_core.errors import ConfigError
from evd_core.loader import import_object, split_path
from sample_listeners import OrderPlaced, reserve_stock, send_receipt


def test_missing_config_is_empty(tmp_path: Path) -> None:
    config = ListenerConfig.load(tmp_path / "absent.toml")

    assert config.listeners == ()
    assert config.sources() == ()


def test_toml_config_lists_listener_sources(tmp_path: Path) -> None:
    path = tmp_path / "listeners.toml"
    path.write_text(
        '[dispatcher]\nlisteners = ["sample_listeners:reserve_stock", " sample_listeners.send_receipt "]\n'
    )

    config = ListenerConfig.load(path)

    assert config.path == path
    assert config.sources() == (
        "sample_listeners:reserve_stock",
        "sample_listeners.send_receipt",
    )
    event = create_dispatcher(*config.sources()).dispatch(OrderPlaced())
    assert event.seen == ["reserve_stock", "send_receipt"]


def test_dispatcher_reads_listeners_from_config(tmp_path: Path) -> None:
    path = tmp_path / "listeners.toml"
    path.write_text('[dispatcher]\nlisteners = ["sample_listeners:reserve_stock"]\n')
    config = ListenerConfig.load(path)

    event = create_dispatcher(config=config).dispatch(OrderPlaced())

    assert event.seen == ["reserve_stock"]


def test_explicit_sources_take_precedence_over_config(tmp_path: Path) -> None:
    path = tmp_path / "listeners.toml"
    path.write_text('[dispatcher]\nlisteners = ["sample_listeners:reserve_stock"]\n')

    dispatcher = create_dispatcher(send_receipt, config=ListenerConfig.load(path))

    assert dispatcher.dispatch(OrderPlaced()).seen == ["send_receipt"]


def test_yaml_config_is_supported(tmp_path: Path) -> None:
    path = tmp_path / "listeners.yaml"
    path.write_text("dispatcher:\n  listeners:\n    - sample_listeners:AuditSubscriber\n")

    assert ListenerConfig.load(path).listeners == ("sample_listeners:AuditSubscriber",)


@pytest.mark.parametrize(
    "name, content",
    [
        ("bad.toml", "[dispatcher\n"),
        ("section.toml", 'dispatcher = "nope"\n'),
        ("list.toml", '[dispatcher]\nlisteners = "sample_listeners:reserve_stock"\n'),
        ("entries.toml", "[dispatcher]\nlisteners = [1, 2]\n"),
        ("scalar.yaml", "just a string\n"),
        ("broken.yaml", "dispatcher: [unclosed\n"),
    ],
)
def test_malformed_configs_raise(tmp_path: Path, name: str, content: str) -> None:
    path = tmp_path / name
    path.write_text(content)

    with pytest.raises(ConfigError):
        ListenerConfig.load(path)


def test_unimportable_entries_raise_config_error(tmp_path: Path) -> None:
    path = tmp_path / "listeners.toml"
    path.write_text('[dispatcher]\nlisteners = ["sample_listeners:does_not_exist"]\n')

    with pytest.raises(ConfigError):
        ListenerConfig.load(path).sources()


def test_default_path_honours_environment(tmp_path: Path) -> None:
    override = tmp_path / "custom.toml"

    assert default_config_path({CONFIG_ENV_VAR: str(override)}) == override
    assert default_config_path({}).name == CONFIG_FILE_NAME


def test_load_without_path_uses_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = tmp_path / "env.toml"
    path.write_text('[dispatcher]\nlisteners = ["sample_listeners:reserve_stock"]\n')
    monkeypatch.setenv(CONFIG_ENV_VAR, str(path))

    assert ListenerConfig.load().listeners == ("sample_listeners:reserve_stock",)


def test_import_object_supports_both_separators() -> None:
    assert import_object("sample_listeners:reserve_stock") is reserve_stock
    assert import_object("sample_listeners.reserve_stock") is reserve_stock
    assert import_object("sample_listeners:Mailer.on_order").__name__ == "on_order"
    assert split_path("a.b.c") == ("a.b", "c")
    assert split_path("a.b:c.d") == ("a.b", "c.d")


@pytest.mark.parametrize("path", ["plain", ":attr", "module:", "sample_listeners:missing"])
def test_import_object_errors(path: str) -> None:
    with pytest.raises(ImportError):
        import_object(path)
