"""Utilities for declaratively registering application modules.

Each engine module exposes ``module_metadata`` and a ``setup_module(app)``
hook in its package ``__init__``. The registry imports them in order so that
models are mapped and signal receivers are connected before the database is
initialized.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from flask import Flask
from werkzeug.utils import import_string


@dataclass(frozen=True)
class ModuleDefinition:
    """Describe how an engine module is set up with the app."""

    import_path: str
    version: str = "1.0"

    def load_setup_hook(self):
        """Import the module and return its ``setup_module`` callable."""

        module = import_string(self.import_path)
        hook = getattr(module, "setup_module", None)
        if not callable(hook):
            raise TypeError(
                "Expected '%s' to define a callable setup_module(app), got %r instead"
                % (self.import_path, type(hook))
            )
        return hook


def register_modules(app: Flask, modules: Sequence[ModuleDefinition]) -> None:
    """Run the setup hook of every module in the provided sequence."""

    enabled = []
    for module in modules:
        hook = module.load_setup_hook()
        hook(app)
        enabled.append(module.import_path.rsplit(".", 1)[-1])
        app.logger.debug(
            "Registered module %s (version %s)",
            module.import_path,
            module.version,
        )
    app.extensions["vocabstack_modules"] = tuple(enabled)


def register_default_modules(app: Flask) -> None:
    """Convenience helper that registers the built-in engine modules."""

    register_modules(app, DEFAULT_MODULES)


DEFAULT_MODULES: Iterable[ModuleDefinition] = (
    ModuleDefinition("vocabstack_app.modules.answer_check", version="1.0"),
    ModuleDefinition("vocabstack_app.modules.review", version="1.0"),
    ModuleDefinition("vocabstack_app.modules.due_cards", version="1.0"),
    ModuleDefinition("vocabstack_app.modules.assessment", version="1.0"),
    ModuleDefinition("vocabstack_app.modules.session", version="1.0"),
    ModuleDefinition("vocabstack_app.modules.progress", version="1.0"),
)
