import pytest

from certitrust.shared.recipients import Recipient, coerce_recipients, parse_csv, parse_manual


def test_manual_lines():
    text = "Budi Santoso, Narasumber, budi@example.com\n\nSiti\nAndi, andi@example.com, Panitia\n"
    assert parse_manual(text, "ID") == [
        Recipient("Budi Santoso", "Narasumber", "budi@example.com"),
        Recipient("Siti", "Peserta", ""),
        Recipient("Andi", "Panitia", "andi@example.com"),
    ]


def test_manual_default_role_english():
    assert parse_manual("Jane", "EN") == [Recipient("Jane", "Participant", "")]


def test_csv_with_header_detection():
    text = "Email,Nama Lengkap,Peran\nrina@example.com,Rina,Pemateri\n,Joko,\n"
    assert parse_csv(text, "ID") == [
        Recipient("Rina", "Pemateri", "rina@example.com"),
        Recipient("Joko", "Peserta", ""),
    ]


def test_csv_without_header():
    assert parse_csv("Tono,Tutor\nTini,Peserta\n") == [
        Recipient("Tono", "Tutor", ""),
        Recipient("Tini", "Peserta", ""),
    ]


def test_coerce_recipients():
    values = [{"name": " Ana ", "role": "", "email": "ana@example.com"}, {"name": ""}]
    assert coerce_recipients(values, "EN") == [Recipient("Ana", "Participant", "ana@example.com")]
    with pytest.raises(ValueError):
        coerce_recipients(["Ana"])
