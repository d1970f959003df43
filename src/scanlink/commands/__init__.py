"""Built-in CLI sub-commands for scanlink.

* :mod:`~scanlink.commands.connection` -- ``connect``, ``disconnect``,
  ``status``.
* :mod:`~scanlink.commands.query` -- ``components`` and ``metadata``
  lookups.
* :mod:`~scanlink.commands.config` -- view and modify global settings.
* :mod:`~scanlink.commands.session` -- builds the
  :class:`~scanlink.connect.ConnectionManager` every command shares.

Each module exports plain callback functions registered on the root app,
except ``config`` which is a :class:`typer.Typer` sub-application.
"""
