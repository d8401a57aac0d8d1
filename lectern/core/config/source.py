"""Settings sources that fill whole top-level sections, e.g. `storage` or `web`.

Each source only reads `root`, `env` and `override`, which the caller passes
as init values, from the state accumulated by the sources before it.
"""

import functools
import typing as t
from pathlib import Path

import pydantic as p
import yaml
from pydantic_settings import PydanticBaseSettingsSource

import lectern.lib.util as util
from lectern.model import DeploymentEnvironment

BootKeys = frozenset({"env", "root", "override"})


class SectionSource(PydanticBaseSettingsSource):
    def sections(self) -> dict[str, t.Any]:
        raise NotImplementedError

    def get_field_value(self, field: p.fields.FieldInfo, field_name: str) -> tuple[t.Any, str, bool]:
        return self.sections().get(field_name), field_name, True

    def __call__(self) -> dict[str, t.Any]:
        fields = self.settings_cls.model_fields
        return {k: v for k, v in self.sections().items() if k in fields and k not in BootKeys}


class OverrideSettingsSource(SectionSource):
    """Turns ``-o storage.records.backend=memory`` into nested mappings.

    Values are parsed as YAML scalars, so ``-o web.market.auth.bcrypt_rounds=4``
    yields an int. Earlier sources win when pydantic-settings merges them,
    so this source is listed before the YAML files.
    """

    @functools.cache
    def sections(self) -> dict[str, t.Any]:
        parsed: dict[str, t.Any] = {}
        for option in self.current_state.get("override", ()):
            path, eq, raw = option.partition("=")
            if not eq or not path.strip():
                raise ValueError(f"override must look like dotted.path=value, got {option!r}")
            *parents, leaf = [part.strip() for part in path.split(".")]
            target = parsed
            for part in parents:
                target = target.setdefault(part, {})
            target[leaf] = yaml.safe_load(raw)
        return parsed


class YAMLCascadingSettingsSource(SectionSource):
    """Loads ``<root>/<section>.yaml``, then merges ``<root>/env.d/<env>/<section>.yaml`` over it.

    The local environment reads the root files only.
    """

    @functools.cached_property
    def directories(self) -> list[Path]:
        root: p.AnyUrl = self.current_state["root"]
        if root.scheme != "file" or root.path is None:
            raise ValueError(f"configuration root must be a file:// URL, got {root}")
        env: DeploymentEnvironment = self.current_state["env"]
        base = Path(root.path)
        if env is DeploymentEnvironment.Local:
            return [base]
        return [base, base / "env.d" / env.value]

    @functools.cache
    def sections(self) -> dict[str, t.Any]:
        loaded: dict[str, t.Any] = {}
        for name in self.settings_cls.model_fields:
            if name in BootKeys:
                continue
            for directory in self.directories:
                path = directory / f"{name}.yaml"
                if not path.exists():
                    continue
                doc = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
                if not isinstance(doc, dict):
                    raise ValueError(f"{path} must contain a mapping")
                loaded[name] = util.deep_update(loaded.get(name, {}), doc)
        return loaded
