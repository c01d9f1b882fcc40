"""ViewModel package for UI state and command surfaces.

Call context:
    ``mapscout/web_ui/runtime.py`` builds ``MapVM`` and ``SettingsVM`` and the
    NiceGUI page binds widgets to their attributes and commands.

Dependencies:
    Modules in this package depend on domain types and use cases only. HTTP
    adapters are composed outside and injected through the use cases.

Responsibilities:
    - Expose mutable UI state and command intents.
    - Absorb use-case failures into a readable ``last_error`` field.
    - Keep MVVM boundaries explicit by avoiding transport logic.
"""
