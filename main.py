import click

from annotate.errors import AnnotateError


@click.command(context_settings={
    "max_content_width": 120,
    "ignore_unknown_options": True,
    "allow_interspersed_args": False,
})
@click.option("--list", "show_list", is_flag=True, help="Print annotations instead of opening the browser")
@click.option("-v", "--verbose", is_flag=True, help="Show internal progress on stderr")
@click.argument("text", nargs=-1, type=click.UNPROCESSED)
def cli(show_list, verbose, text):
    """Jot down a timestamped annotation, or browse them.

    With TEXT, the words are joined with spaces and appended to
    ~/.annotations. Without it, an interactive list opens where entries
    can be reviewed and removed.
    """
    from annotate import log
    from annotate.config import load_config
    from annotate.store import AnnotationStore

    try:
        config = load_config()
        log.set_verbose(verbose or config.get("log", {}).get("verbose", False))
        store = AnnotationStore.from_environment(config=config)

        if text:
            _annotate(store, " ".join(text))
        elif show_list:
            _print_annotations(store, config)
        else:
            from annotate.ui import run_session
            run_session(store, config)
    except AnnotateError as e:
        raise click.ClickException(str(e)) from e


def _annotate(store, content: str):
    try:
        store.append(content)
    except OSError as e:
        click.echo(f"Annotation failed: {e}", err=True)
        raise click.exceptions.Exit(1)


def _print_annotations(store, config: dict):
    from annotate.session import EMPTY_HINT, EMPTY_MESSAGE, ListController

    annotations = store.load()
    if not annotations:
        click.echo(EMPTY_MESSAGE)
        click.echo(EMPTY_HINT)
        return

    age_width = config.get("ui", {}).get("age_width", 14)
    for row in ListController(annotations, age_width=age_width).rows():
        click.echo(row)


if __name__ == "__main__":
    cli()
