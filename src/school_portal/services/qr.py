"""QR codes that link an entity to its public identity card.

A code is never stored. It is recomputed from (kind, id, origin) whenever it is
shown, which is what keeps it stable while the rest of the record is edited.
"""

import base64
import io
import re
from dataclasses import dataclass
from uuid import UUID

import qrcode
from qrcode.constants import ERROR_CORRECT_M

from school_portal.domain.models import EntityKind
from school_portal.domain.profiles import qr_payload

DARK_COLOR = "#1e1b4b"
LIGHT_COLOR = "#ffffff"


@dataclass(frozen=True)
class RenderedQR:
    """A rendered QR code in both inline and downloadable form."""

    payload: str
    png: bytes

    @property
    def data_url(self) -> str:
        """Return the PNG as a data URL suitable for an <img> tag."""
        encoded = base64.b64encode(self.png).decode("ascii")
        return f"data:image/png;base64,{encoded}"


def build_code(payload: str, box_size: int = 10, border: int = 2) -> qrcode.QRCode:
    """Return a fitted QR code object for the payload."""
    code = qrcode.QRCode(
        error_correction=ERROR_CORRECT_M, box_size=box_size, border=border
    )
    code.add_data(payload)
    code.make(fit=True)
    return code


def render_qr(
    kind: EntityKind,
    entity_id: UUID,
    origin: str,
    *,
    box_size: int = 10,
    border: int = 2,
) -> RenderedQR:
    """Render the QR code for an entity's public profile URL."""
    payload = qr_payload(kind, entity_id, origin)
    code = build_code(payload, box_size=box_size, border=border)
    image = code.make_image(fill_color=DARK_COLOR, back_color=LIGHT_COLOR)
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return RenderedQR(payload=payload, png=buffer.getvalue())


@dataclass
class QRIssuer:
    """Renders QR codes against the configured serving origin."""

    origin: str
    box_size: int = 10

    def render(self, kind: EntityKind, entity_id: UUID) -> RenderedQR:
        """Render the code for one entity."""
        return render_qr(kind, entity_id, self.origin, box_size=self.box_size)

    def payload(self, kind: EntityKind, entity_id: UUID) -> str:
        """Return the URL the code encodes without rendering an image."""
        return qr_payload(kind, entity_id, self.origin)

    @staticmethod
    def download_name(label: str) -> str:
        """Return the attachment filename for a downloaded code."""
        slug = re.sub(r"[^A-Za-z0-9]+", "-", label).strip("-").lower()
        return f"qr-{slug or 'code'}.png"
