"""
Tracking Codes

Each evidence item carries a QR code whose payload is a fixed prefix followed
by the item's own identifier, e.g. ``EVIDENCE:550e8400-...``. Scanning the
label and resolving the payload leads back to the item.
"""

from io import BytesIO

import qrcode
from qrcode.constants import ERROR_CORRECT_M

from custody_service.core.errors import BadRequestError, ensure_valid_id

DEFAULT_PREFIX = "EVIDENCE:"


class TrackingCodes:
    """Derives, parses and renders evidence tracking payloads"""

    def __init__(self, prefix: str = DEFAULT_PREFIX, box_size: int = 10, border: int = 2):
        self.prefix = prefix
        self.box_size = box_size
        self.border = border

    def payload_for(self, evidence_id: str) -> str:
        return f"{self.prefix}{evidence_id}"

    def parse(self, payload: str) -> str:
        """Extract the evidence id embedded in a payload

        Raises:
            BadRequestError: If the prefix is missing or the id is malformed
        """
        payload = (payload or "").strip()
        if not payload.startswith(self.prefix):
            raise BadRequestError("Not an evidence tracking code")
        return ensure_valid_id(payload[len(self.prefix):])

    def render(self, payload: str) -> bytes:
        """Render the payload as a PNG QR image"""
        qr = qrcode.QRCode(
            error_correction=ERROR_CORRECT_M,
            box_size=self.box_size,
            border=self.border,
        )
        qr.add_data(payload)
        qr.make(fit=True)

        image = qr.make_image(fill_color="black", back_color="white")
        buffer = BytesIO()
        image.save(buffer)
        return buffer.getvalue()
