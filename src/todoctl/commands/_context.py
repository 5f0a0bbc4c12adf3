"""AppContext: the object behind ``@click.pass_obj`` in every command.

The root group builds one per invocation from :class:`TodoSettings`.
Commands take the store and request context from it and hand their
:class:`ServiceResult` back to :meth:`AppContext.emit`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from todoctl.output.formatters import OutputSettings, format_result
from todoctl.services.commands import RequestContext

if TYPE_CHECKING:
    from todoctl.config.settings import TodoSettings
    from todoctl.infrastructure.store import Store
    from todoctl.services.result import ServiceResult


class AppContext:
    """Settings, a lazily opened store, and result output for one CLI run.

    Nothing touches the database until a command asks for :attr:`store`,
    so ``--help``, ``--version`` and ``--examples`` work anywhere.
    """

    def __init__(self, settings: TodoSettings, store: Store | None = None) -> None:
        from todoctl.config.logging import configure_logging

        self.settings = settings
        self._store = store
        self._output = OutputSettings(
            json_output=settings.json_output,
            quiet=settings.quiet,
            verbose=settings.verbose,
        )
        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def store(self) -> Store:
        if self._store is None:
            from todoctl.infrastructure.store import Store

            self._store = Store.from_settings(self.settings)
        return self._store

    @property
    def request(self) -> RequestContext:
        """Acting user and workspace from the ``[workspace]`` section."""
        workspace = self.settings.workspace
        return RequestContext(
            user_id=workspace.user_id,  # type: ignore[arg-type]
            workspace_id=workspace.workspace_id,  # type: ignore[arg-type]
        )

    def emit(self, result: ServiceResult) -> None:
        """Print *result*; a failed result ends the process with status 1.

        Failures print to stderr. Warnings also go to stderr, except under
        ``--json`` where the payload already carries them.
        """
        click.echo(format_result(result, settings=self._output), err=not result.ok)
        if not result.ok:
            raise SystemExit(1)
        if not self._output.json_output:
            for warning in result.warnings:
                click.echo(f"WARNING: {warning}", err=True)

    def close(self) -> None:
        if self._store is not None:
            self._store.close()
            self._store = None
