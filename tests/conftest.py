import os
import pathlib
import sys
from io import BytesIO

import pytest
from PIL import Image

PROJECT_ROOT = pathlib.Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from certitrust.app import create_app, db
from certitrust.models import Template
from certitrust.shared.template_fields import get_default_fields


def pytest_collection_modifyitems(config, items):
    for item in items:
        if "slow" in item.keywords or "quarantine" in item.keywords:
            continue
        item.add_marker("full")
        if "no_smoke" in item.keywords:
            continue
        item.add_marker("smoke")


def png_bytes(width=1000, height=700, color=(250, 248, 240)):
    buffer = BytesIO()
    Image.new("RGB", (width, height), color).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def app():
    os.environ["DATABASE_URL"] = "sqlite:///:memory:"
    os.environ.pop("PUBLIC_ORIGIN", None)
    application = create_app()
    application.config["TESTING"] = True
    with application.app_context():
        db.create_all()
        yield application
        db.session.remove()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def template(app):
    tmpl = Template(
        name="Seminar Nasional",
        background_image=png_bytes(),
        background_mime="image/png",
        width=1000,
        height=700,
        fields=get_default_fields(),
    )
    db.session.add(tmpl)
    db.session.commit()
    return tmpl


@pytest.fixture
def background_png():
    return png_bytes()
