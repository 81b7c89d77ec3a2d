import csv
import io
import re


def _issue(client, template, **overrides):
    payload = {
        "template_id": template.id,
        "event_name": "Seminar Nasional",
        "issue_date": "2024-05-20",
        "language": "ID",
        "manual_text": "Budi, Peserta, budi@example.com\nDr. Wulan, Narasumber\nRatna, Panitia",
    }
    payload.update(overrides)
    return client.post("/admin/certificates/issue", json=payload)


def test_issue_from_manual_text(client, template):
    resp = _issue(client, template)
    assert resp.status_code == 201
    records = resp.get_json()
    assert [r["recipient_name"] for r in records] == ["Budi", "Dr. Wulan", "Ratna"]
    assert re.match(r"^SRT-NRS/\d{4}/0002-\d{3}$", records[1]["certificate_number"])
    assert records[0]["custom_text"] == "Diberikan kepada Budi"


def test_issue_from_csv_and_json_recipients(client, template):
    resp = _issue(client, template, manual_text=None, csv_text="Nama,Peran\nEka,Tutor\n")
    assert resp.status_code == 201
    assert resp.get_json()[0]["certificate_number"].startswith("SRT-INS/")

    resp = _issue(client, template, recipients=[{"name": "Fajar", "role": "Speaker"}])
    assert resp.status_code == 201
    assert resp.get_json()[0]["recipient_role"] == "Speaker"


def test_issue_validation(client, template):
    assert _issue(client, template, template_id="").status_code == 400
    assert _issue(client, template, event_name="").status_code == 400
    assert _issue(client, template, manual_text="").status_code == 400
    assert _issue(client, template, language="FR").status_code == 400
    assert _issue(client, template, template_id="missing").status_code == 404


def test_list_search_events_and_export(client, template):
    _issue(client, template)
    _issue(client, template, event_name="Workshop", manual_text="Gita")

    assert client.get("/admin/certificates/events").get_json() == ["Seminar Nasional", "Workshop"]
    assert len(client.get("/admin/certificates").get_json()) == 4
    assert len(client.get("/admin/certificates?event=Workshop").get_json()) == 1
    assert [r["recipient_name"] for r in client.get("/admin/certificates?q=wul").get_json()] == ["Dr. Wulan"]

    resp = client.get("/admin/certificates/export.csv?event=Seminar%20Nasional")
    assert resp.status_code == 200
    assert resp.headers["Content-Disposition"] == "attachment; filename=certificates.csv"
    rows = list(csv.reader(io.StringIO(resp.get_data(as_text=True))))
    assert rows[0][0] == "certificate_number"
    assert len(rows) == 4


def test_edit_and_delete(client, template):
    record = _issue(client, template).get_json()[0]
    url = f"/admin/certificates/{record['id']}"
    resp = client.put(url, json={"recipient_name": "Budi Santoso", "issue_date": "2024-06-01", "status": "draft"})
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["recipient_name"] == "Budi Santoso"
    assert body["issue_date"] == "2024-06-01"
    assert body["status"] == "draft"
    assert body["certificate_number"] == record["certificate_number"]

    assert client.put(url, json={"recipient_name": ""}).status_code == 400
    assert client.put(url, json={"language": "XX"}).status_code == 400
    assert client.get(url).get_json()["recipient_name"] == "Budi Santoso"

    assert client.delete(url).status_code == 200
    assert client.get(url).status_code == 404


def test_legacy_import_endpoint(client, template):
    resp = client.post(
        "/admin/certificates/legacy-import",
        json={"template_id": template.id, "csv_text": "No,Nama\nLAMA-1,Yudi\n"},
    )
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["imported"][0]["certificate_number"] == "LAMA-1"
    assert body["skipped"] == []
    assert client.post("/admin/certificates/legacy-import", json={"csv_text": "x"}).status_code == 400
