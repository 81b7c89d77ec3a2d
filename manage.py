from certitrust.app import create_app, db

from flask_migrate import Migrate
from flask.cli import FlaskGroup
import click
from flask import current_app
from certitrust.services.issuance import issue_batch
from certitrust.services.legacy_import import import_legacy
from certitrust.services.verification import record_pdf, render_record, verify_certificate
from certitrust.shared.errors import CertiTrustError
from certitrust.shared.fields import normalize_origin
from certitrust.shared.numbering import classify
from certitrust.shared.recipients import parse_csv
from certitrust.shared.store import SqlStore


migrate = Migrate()


def create_certitrust_app():
    app = create_app()
    migrate.init_app(app, db)
    return app


cli = FlaskGroup(create_app=create_certitrust_app)


@cli.command("issue")
@click.option("--template", "template_id", required=True)
@click.option("--event", "event_name", required=True)
@click.option("--csv", "csv_file", required=True, type=click.File("r", encoding="utf-8-sig"))
@click.option("--date", "issue_date", default=None, help="Issue date (YYYY-MM-DD)")
@click.option("--language", default=None, type=click.Choice(["EN", "ID"], case_sensitive=False))
def issue(template_id: str, event_name: str, csv_file, issue_date, language):
    """Issue numbered certificates for every recipient in a CSV file."""
    recipients = parse_csv(csv_file.read(), language)
    if not recipients:
        click.echo("No recipients found", err=True)
        raise SystemExit(1)
    try:
        records = issue_batch(
            SqlStore(db.session),
            template_id=template_id,
            recipients=recipients,
            event_name=event_name,
            issue_date=issue_date,
            language=language,
        )
    except (CertiTrustError, ValueError) as exc:
        click.echo(str(exc), err=True)
        raise SystemExit(1)
    for record in records:
        click.echo(f"{record.certificate_number}\t{record.recipient_name}\t{record.recipient_role}")
    click.echo(f"issued={len(records)}")


@cli.command("render")
@click.option("--number", required=True, help="Certificate number or id")
@click.option("--out", "out_path", required=True, type=click.Path(dir_okay=False))
@click.option("--scale", default=None, type=float)
@click.option("--pdf", "as_pdf", is_flag=True, help="Write a single-page PDF")
def render_cmd(number: str, out_path: str, scale, as_pdf: bool):
    """Render one issued certificate to PNG (or PDF with --pdf)."""
    store = SqlStore(db.session)
    result = verify_certificate(store, number)
    if not result.ok:
        click.echo(f"Cannot render: {result.status}", err=True)
        raise SystemExit(1)
    config = current_app.config
    origin = normalize_origin(config.get("PUBLIC_ORIGIN"))
    if scale is None:
        scale = config["EXPORT_SCALE"] if as_pdf else config["PREVIEW_SCALE"]
    try:
        if as_pdf:
            payload = record_pdf(
                store,
                result.record,
                scale,
                quality=config["EXPORT_JPEG_QUALITY"],
                origin=origin,
                font_dir=config.get("FONT_DIR"),
            )
        else:
            surface = render_record(
                store, result.record, scale, origin=origin, font_dir=config.get("FONT_DIR")
            )
            for warning in surface.warnings:
                click.echo(warning, err=True)
            payload = surface.to_png()
    except (CertiTrustError, ValueError) as exc:
        click.echo(str(exc), err=True)
        raise SystemExit(1)
    with open(out_path, "wb") as fh:
        fh.write(payload)
    click.echo(out_path)


@cli.command("classify")
@click.argument("role")
def classify_cmd(role: str):
    """Print the numbering category for a role description."""
    click.echo(classify(role).value)


@cli.command("legacy-import")
@click.option("--template", "template_id", required=True)
@click.option("--csv", "csv_file", required=True, type=click.File("r", encoding="utf-8-sig"))
def legacy_import(template_id: str, csv_file):
    """Import certificates exported from the previous system."""
    try:
        result = import_legacy(
            SqlStore(db.session), template_id=template_id, csv_text=csv_file.read()
        )
    except (CertiTrustError, ValueError) as exc:
        click.echo(str(exc), err=True)
        raise SystemExit(1)
    for skipped in result.skipped[:5]:
        click.echo(
            f"skipped line={skipped['line']} number={skipped['certificate_number']}", err=True
        )
    click.echo(f"imported={len(result.imported)} skipped={len(result.skipped)}")


@cli.command("reset-data")
@click.option("--yes", is_flag=True, help="Skip the confirmation prompt")
def reset_data(yes: bool):
    """Delete all certificates and templates and restore default settings."""
    if not yes:
        click.confirm("This permanently deletes all certificates and templates. Continue?", abort=True)
    removed = SqlStore(db.session).clear_all()
    current_app.logger.warning(
        "[reset-data] removed certificates=%s templates=%s",
        removed["certificates"],
        removed["templates"],
    )
    click.echo(f"certificates={removed['certificates']} templates={removed['templates']}")


if __name__ == "__main__":
    cli()
