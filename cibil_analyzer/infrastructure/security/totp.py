"""Authenticator-app TOTP secrets, provisioning URIs and QR codes"""

import base64
import io
from datetime import datetime
from typing import Optional

import pyotp
import qrcode

from cibil_analyzer.config import settings


class TotpProvider:
    """RFC 6238 codes: 6 digits, 30-second steps, configurable skew window"""

    def __init__(self, issuer: Optional[str] = None, valid_window: Optional[int] = None):
        self.issuer = issuer or settings.totp_issuer
        self.valid_window = settings.totp_valid_window if valid_window is None else valid_window

    def generate_secret(self) -> str:
        return pyotp.random_base32()

    def provisioning_uri(self, secret: str, email: str) -> str:
        return pyotp.TOTP(secret).provisioning_uri(name=email, issuer_name=self.issuer)

    def verify(self, secret: str, code: str, for_time: Optional[datetime] = None) -> bool:
        """Accept codes for the current step or up to valid_window steps either side"""
        if not code.isdigit():
            return False
        return pyotp.TOTP(secret).verify(code, for_time=for_time, valid_window=self.valid_window)

    def qr_code_data_url(self, uri: str) -> str:
        """Render a provisioning URI as a base64 PNG data URL"""
        qr = qrcode.QRCode(
            version=None,
            error_correction=qrcode.ERROR_CORRECT_M,
            box_size=8,
            border=4,
        )
        qr.add_data(uri)
        qr.make(fit=True)

        buffer = io.BytesIO()
        qr.make_image(fill_color="black", back_color="white").save(buffer)
        encoded = base64.b64encode(buffer.getvalue()).decode("ascii")
        return f"data:image/png;base64,{encoded}"
