import os

from certitrust.shared import fonts
from certitrust.shared.fonts import FontResolver


def test_font_dir_candidates_come_first(tmp_path):
    resolver = FontResolver(str(tmp_path))
    paths = resolver.candidates("Playfair Display", "bold")
    assert paths[0] == os.path.join(str(tmp_path), "PlayfairDisplay-Bold.ttf")
    assert paths[-1].endswith("DejaVuSerif-Bold.ttf")


def test_unknown_family_maps_to_sans():
    assert FontResolver().candidates("Comic Neue", "normal")[-1].endswith("DejaVuSans.ttf")


def test_missing_fonts_fall_back_with_warning(monkeypatch):
    monkeypatch.setattr(fonts, "_FONT_PATHS", {key: "/missing/font.ttf" for key in fonts._FONT_PATHS})
    monkeypatch.setattr(fonts, "_DEFAULT_FONT_PATH", "/missing/default.ttf")
    warnings = []
    resolver = FontResolver(None, warnings)
    font = resolver.load("Inter", "normal", 24)
    assert font.getlength("Sertifikat") > 0
    assert resolver.load("Inter", "normal", 24) is font
    assert warnings == ["[render-font-fallback] using default font"]
