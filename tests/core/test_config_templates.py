from __future__ import annotations

from pathlib import Path

import pytest

from extract_helps.core import config_templates
from extract_helps.core.config_templates import (
    ConfigTemplate,
    ConfigTemplateError,
)


def test_get_template_returns_extract_helps_template(tmp_path: Path) -> None:
    template = config_templates.get_template("extract_helps")
    assert isinstance(template, ConfigTemplate)

    contents = template.read_text()
    assert "[render]" in contents
    assert "strict_duplicates" in contents

    target = tmp_path / "config.toml"
    written = template.write(target)
    assert written == target
    assert target.read_text(encoding="utf-8") == contents

    with pytest.raises(ConfigTemplateError):
        template.write(target)

    updated = template.write(target, overwrite=True)
    assert updated == target


def test_packaged_template_loads_with_defaults(tmp_path: Path) -> None:
    from extract_helps import config as cfg

    target = config_templates.get_template("extract_helps").write(
        tmp_path / cfg.CONFIG_FILENAME
    )

    result = cfg.load_config(config_path=target, env={})

    assert result.config == cfg.ExtractHelpsConfig()


@pytest.mark.parametrize("unknown", ["missing", "", "convert_markdown"])
def test_get_template_unknown_raises(unknown: str) -> None:
    with pytest.raises(ConfigTemplateError):
        config_templates.get_template(unknown)
