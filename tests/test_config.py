"""Tests for ContextVar-based footnote configuration.

Validates defaults, validation, from_dict aliases, thread isolation and the
context manager.
"""

from threading import Thread

import pytest

from notitas import (
    ConfigError,
    FootnotesConfig,
    default_back_link_label,
    footnotes_config_context,
    get_footnotes_config,
    reset_footnotes_config,
    set_footnotes_config,
)
from notitas.registry import FootnoteEntry


class TestFootnotesConfigDataclass:
    """FootnotesConfig frozen dataclass behavior."""

    def test_default_values(self) -> None:
        config = FootnotesConfig()
        assert config.base_class == "Footnotes"
        assert config.title == "Footnotes"
        assert config.title_id == "footnotes-label"
        assert dict(config.class_names) == {}
        assert config.back_link_label is default_back_link_label
        assert config.back_link_text == "↩"
        assert config.strict is False

    def test_immutability(self) -> None:
        config = FootnotesConfig()
        with pytest.raises(AttributeError):
            config.title = "Notes"  # type: ignore[misc]

    def test_class_overrides_are_read_only(self) -> None:
        overrides = {"ref": "fn"}
        config = FootnotesConfig(class_names=overrides)
        overrides["ref"] = "changed"
        assert config.class_name("ref") == "fn"
        with pytest.raises(TypeError):
            config.class_names["ref"] = "x"  # type: ignore[index]

    def test_hashable(self) -> None:
        config = FootnotesConfig(class_names={"ref": "fn"})
        assert hash(FootnotesConfig()) == hash(FootnotesConfig())
        assert {config: "cached"}[config] == "cached"
        assert config == FootnotesConfig(class_names={"ref": "fn"})

    def test_default_back_link_label(self) -> None:
        entry = FootnoteEntry(id="a", description="A", index=1)
        assert default_back_link_label(entry, 0) == "Back to reference 1"
        assert default_back_link_label(entry, 4) == "Back to reference 5"


class TestClassName:
    """BEM class composition."""

    def test_block(self) -> None:
        assert FootnotesConfig().class_name() == "Footnotes"

    def test_element(self) -> None:
        assert FootnotesConfig().class_name("back-link") == "Footnotes__back-link"

    def test_custom_block(self) -> None:
        assert FootnotesConfig(base_class="Kitty").class_name("ref") == "Kitty__ref"

    def test_override(self) -> None:
        config = FootnotesConfig(class_names={"": "notes", "ref": "fn"})
        assert config.class_name() == "notes"
        assert config.class_name("ref") == "fn"
        assert config.class_name("title") == "Footnotes__title"


class TestValidation:
    """Invalid values raise ConfigError."""

    def test_empty_base_class(self) -> None:
        with pytest.raises(ConfigError, match="base_class"):
            FootnotesConfig(base_class="")

    def test_empty_title_id(self) -> None:
        with pytest.raises(ConfigError, match="title_id"):
            FootnotesConfig(title_id="")

    def test_label_not_callable(self) -> None:
        with pytest.raises(ConfigError, match="back_link_label"):
            FootnotesConfig(back_link_label="Back")  # type: ignore[arg-type]


class TestFromDict:
    """FootnotesConfig.from_dict."""

    def test_field_names(self) -> None:
        config = FootnotesConfig.from_dict({"title": "Notes", "strict": True})
        assert config.title == "Notes"
        assert config.strict is True

    def test_camel_case_options(self) -> None:
        label = lambda entry, i: f"up {i}"  # noqa: E731
        config = FootnotesConfig.from_dict(
            {"baseClass": "Kitty", "titleId": "foobar", "backLinkLabel": label}
        )
        assert config.base_class == "Kitty"
        assert config.title_id == "foobar"
        assert config.back_link_label is label

    def test_unknown_keys_ignored(self) -> None:
        config = FootnotesConfig.from_dict({"colour": "red", "title": "T"})
        assert config.title == "T"

    def test_none_values_use_defaults(self) -> None:
        config = FootnotesConfig.from_dict({"title": None, "titleId": None})
        assert config.title == "Footnotes"
        assert config.title_id == "footnotes-label"

    def test_empty_dict(self) -> None:
        config = FootnotesConfig.from_dict({})
        assert config.base_class == "Footnotes"
        assert config.back_link_label is default_back_link_label


class TestContextVarFunctions:
    """get/set/reset functions."""

    def teardown_method(self) -> None:
        reset_footnotes_config()

    def test_get_default(self) -> None:
        assert get_footnotes_config().title == "Footnotes"

    def test_set_and_reset(self) -> None:
        set_footnotes_config(FootnotesConfig(title="Notes"))
        assert get_footnotes_config().title == "Notes"
        reset_footnotes_config()
        assert get_footnotes_config().title == "Footnotes"

    def test_context_manager_restores(self) -> None:
        outer = FootnotesConfig(title="Outer")
        set_footnotes_config(outer)
        with footnotes_config_context(FootnotesConfig(title="Inner")) as inner:
            assert get_footnotes_config() is inner
        assert get_footnotes_config() is outer

    def test_context_manager_restores_on_error(self) -> None:
        with pytest.raises(RuntimeError):
            with footnotes_config_context(FootnotesConfig(title="Inner")):
                raise RuntimeError("boom")
        assert get_footnotes_config().title == "Footnotes"

    def test_thread_isolation(self) -> None:
        """Each thread sees the config it set."""
        results: dict[int, str] = {}

        def worker(thread_id: int, config: FootnotesConfig) -> None:
            set_footnotes_config(config)
            results[thread_id] = get_footnotes_config().title

        configs = [FootnotesConfig(title=f"Notes {i}") for i in range(4)]
        threads = [Thread(target=worker, args=(i, c)) for i, c in enumerate(configs)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert results == {i: f"Notes {i}" for i in range(4)}
        assert get_footnotes_config().title == "Footnotes"
