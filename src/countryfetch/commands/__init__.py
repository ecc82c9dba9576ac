"""Built-in CLI sub-commands for countryfetch.

* :mod:`~countryfetch.commands.lookup` -- ``name``, ``capital``,
  ``region``, ``regions`` and ``random``.
* :mod:`~countryfetch.commands.sync` -- refresh the cached dataset.
* :mod:`~countryfetch.commands.cache` -- inspect and clear the cache.
* :mod:`~countryfetch.commands.config` -- view and modify settings.
* :mod:`~countryfetch.commands.common` -- collaborator wiring shared by
  the commands above.

Group modules export a :class:`typer.Typer` sub-application; single
commands are plain callbacks registered on the root app.
"""
