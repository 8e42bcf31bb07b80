"""Click option helpers for the direction flags."""
import click


def _check_conflicts(name: str, conflicts_with: list[str], opts: dict) -> None:
    """Raise UsageError if a conflicting direction flag is also present.

    Args:
        name: Name of the current option.
        conflicts_with: Option names that cannot be combined with it.
        opts: Dictionary of parsed options.

    Raises:
        click.UsageError: If a conflicting option is present.
    """
    for other in conflicts_with:
        if opts.get(other):
            msg = f"Options --{name} and --{other} are mutually exclusive"
            raise click.UsageError(msg)


class DirectionOption(click.Option):
    """Flag option selecting a sync direction, exclusive with the others."""

    def __init__(self, *args, **kwargs):
        """Initialize with conflicts_with listing the other direction flags."""
        self.conflicts_with = kwargs.pop("conflicts_with", [])
        super().__init__(*args, **kwargs)

    def handle_parse_result(self, ctx, opts, args):
        """Check that no other direction flag was given alongside this one."""
        if opts.get(self.name):
            _check_conflicts(self.name, self.conflicts_with, opts)
        return super().handle_parse_result(ctx, opts, args)
