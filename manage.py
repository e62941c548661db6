import json

import click
from flask.cli import FlaskGroup
from flask_migrate import Migrate

from kiattibat.app import create_app, db
from kiattibat.services.certificates_render import render_document
from kiattibat.services.persistence import build_template_store, replace_clusters
from kiattibat.shared.templates import Cluster


migrate = Migrate()


def create_kiattibat_app():
    app = create_app()
    migrate.init_app(app, db)
    return app


cli = FlaskGroup(create_app=create_kiattibat_app)


@cli.command("seed_clusters")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
def seed_clusters(path: str):
    """Replace the cluster list from a JSON file of {id, name} objects."""
    with open(path, encoding="utf-8") as fh:
        rows = json.load(fh)
    clusters = [
        Cluster(str(row["id"]), str(row.get("name") or row["id"]))
        for row in rows
        if isinstance(row, dict) and row.get("id")
    ]
    count = replace_clusters(clusters)
    click.echo(f"Seeded {count} clusters.")


@cli.command("render_sample")
@click.option("--context", "context_key", default="area", show_default=True)
@click.option("--out", "out_path", required=True, type=click.Path(dir_okay=False))
@click.option("--counter", type=int, default=None, help="Serial counter override")
def render_sample(context_key: str, out_path: str, counter: int | None):
    """Write the sample certificate of a context to an HTML file."""
    template = build_template_store().resolve(context_key)
    document = render_document(template, serial_counter=counter)
    with open(out_path, "w", encoding="utf-8") as fh:
        fh.write(document.html)
    click.echo(f"{out_path} ({document.page_size}, {document.page_count} page)")


@cli.command("show_config")
@click.option("--context", "context_key", default="area", show_default=True)
def show_config(context_key: str):
    """Print the resolved template of a context as JSON."""
    template = build_template_store().resolve(context_key)
    click.echo(json.dumps(template.to_dict(), ensure_ascii=False, indent=2))


if __name__ == "__main__":
    cli()
