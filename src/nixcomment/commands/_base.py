"""Click command and group classes for nixcomment.

Both take an optional ``examples=`` text. When it is set, the command grows
an eager ``--examples`` flag that prints the text under an
``Examples for '<command path>':`` heading and exits 0 before any argument
validation runs.
"""

from __future__ import annotations

from typing import Any

import click


class _ExamplesMixin:
    """Stores ``examples`` and wires the ``--examples`` flag for it."""

    examples: str | None
    params: list[click.Parameter]

    def _init_examples(self, examples: str | None) -> None:
        self.examples = examples
        if examples:
            self.params.append(
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=self._print_examples,
                    help="Show usage examples.",
                )
            )

    def _print_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or not self.examples:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(self.examples)
        ctx.exit(0)


class NcCommand(_ExamplesMixin, click.Command):
    """A leaf command such as ``check`` or ``init``."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)


class NcGroup(_ExamplesMixin, click.Group):
    """The root ``nixcomment`` group.

    Subcommands registered with ``@group.command`` are built as
    :class:`NcCommand`, so they take ``examples=`` too.
    """

    command_class = NcCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)
