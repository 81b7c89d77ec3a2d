from certitrust.app import db
from certitrust.shared.store import SqlStore
from manage import classify_cmd, issue, legacy_import, render_cmd, reset_data


def _runner(app):
    for command in (classify_cmd, issue, legacy_import, render_cmd, reset_data):
        app.cli.add_command(command)
    return app.test_cli_runner()


def test_classify_command(app):
    runner = _runner(app)
    res = runner.invoke(args=["classify", "Narasumber Utama"])
    assert res.exit_code == 0
    assert res.output.strip() == "speaker"


def test_issue_and_render_commands(app, template, tmp_path):
    runner = _runner(app)
    csv_path = tmp_path / "recipients.csv"
    csv_path.write_text("Nama,Peran,Email\nLina,Peserta,lina@example.com\nOmar,Panitia,\n")
    res = runner.invoke(
        args=["issue", "--template", template.id, "--event", "Pelatihan", "--csv", str(csv_path), "--date", "2024-02-01"]
    )
    assert res.exit_code == 0, res.output
    assert "issued=2" in res.output
    records = SqlStore(db.session).list_certificates(event="Pelatihan")
    assert len(records) == 2

    number = next(r.certificate_number for r in records if r.recipient_name == "Omar")
    out = tmp_path / "omar.pdf"
    res = runner.invoke(args=["render", "--number", number, "--out", str(out), "--scale", "0.2", "--pdf"])
    assert res.exit_code == 0, res.output
    assert out.read_bytes().startswith(b"%PDF")


def test_render_unknown_number_fails(app, tmp_path):
    runner = _runner(app)
    res = runner.invoke(args=["render", "--number", "NOPE", "--out", str(tmp_path / "x.png")])
    assert res.exit_code == 1


def test_legacy_import_command(app, template, tmp_path):
    runner = _runner(app)
    csv_path = tmp_path / "legacy.csv"
    csv_path.write_text("Nomor,Nama\nL-1,Rahmat\nL-2,Sari\n")
    res = runner.invoke(args=["legacy-import", "--template", template.id, "--csv", str(csv_path)])
    assert res.exit_code == 0, res.output
    assert "imported=2 skipped=0" in res.output


def test_reset_data_requires_confirmation(app, template):
    runner = _runner(app)
    res = runner.invoke(args=["reset-data"], input="n\n")
    assert res.exit_code == 1
    assert SqlStore(db.session).get_template(template.id) is not None


def test_reset_data_clears_records(app, template, tmp_path):
    runner = _runner(app)
    csv_path = tmp_path / "recipients.csv"
    csv_path.write_text("Nama,Peran\nLina,Peserta\n")
    res = runner.invoke(
        args=["issue", "--template", template.id, "--event", "Pelatihan", "--csv", str(csv_path)]
    )
    assert res.exit_code == 0, res.output
    res = runner.invoke(args=["reset-data", "--yes"])
    assert res.exit_code == 0, res.output
    assert "certificates=1 templates=1" in res.output
    store = SqlStore(db.session)
    assert store.list_certificates() == []
    assert store.list_templates() == []
