"""Command handler modules.

Every public module here exposes a module-level ``command`` and is picked
up by ``CommandRegistry.build``. Modules starting with ``_`` are helpers
and are not loaded as commands.
"""
