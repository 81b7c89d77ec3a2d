from __future__ import annotations

import logging
from dataclasses import dataclass
from urllib.parse import unquote

from ..models import CertificateRecord, Template
from ..shared.codes import CodeGenerator
from ..shared.errors import MissingTemplateError
from ..shared.export import build_pdf
from ..shared.render import RasterSurface, render
from ..shared.template_model import RenderData, TemplateLayout

logger = logging.getLogger("certitrust.verify")

STATUS_FOUND = "found"
STATUS_NOT_FOUND = "not_found"
STATUS_TEMPLATE_MISSING = "template_missing"


@dataclass(frozen=True)
class VerificationResult:
    status: str
    record: CertificateRecord | None = None
    template: Template | None = None

    @property
    def ok(self) -> bool:
        return self.status == STATUS_FOUND


def verify_certificate(store, number: str | None) -> VerificationResult:
    cleaned = unquote((number or "").strip()).strip()
    if not cleaned:
        return VerificationResult(STATUS_NOT_FOUND)
    record = store.get_certificate(cleaned)
    if record is None:
        logger.info("[verify] not found number=%r", cleaned)
        return VerificationResult(STATUS_NOT_FOUND)
    template = store.get_template(record.template_id)
    if template is None:
        logger.warning(
            "[verify] template missing number=%r template=%s",
            record.certificate_number,
            record.template_id,
        )
        return VerificationResult(STATUS_TEMPLATE_MISSING, record=record)
    return VerificationResult(STATUS_FOUND, record=record, template=template)


def render_record(
    store,
    record: CertificateRecord,
    scale: float,
    *,
    origin: str | None = None,
    font_dir: str | None = None,
    code_generator: CodeGenerator | None = None,
) -> RasterSurface:
    template = store.get_template(record.template_id)
    if template is None:
        raise MissingTemplateError(record.template_id)
    return render(
        TemplateLayout.from_model(template),
        RenderData.from_record(record),
        scale,
        origin=origin,
        font_dir=font_dir,
        code_generator=code_generator,
    )


def record_pdf(
    store,
    record: CertificateRecord,
    scale: float,
    *,
    quality: int = 85,
    origin: str | None = None,
    font_dir: str | None = None,
) -> bytes:
    surface = render_record(store, record, scale, origin=origin, font_dir=font_dir)
    return build_pdf(surface.image, quality=quality, title=record.certificate_number)


def download_filename(record: CertificateRecord, extension: str = "pdf") -> str:
    safe = record.certificate_number.replace("/", "-").replace("\\", "-")
    return f"{safe}.{extension}"
