"""
Encryption utilities for SkorZen School Portal
Keeps a reversible copy of generated teacher passwords so the admin can hand them out
"""

import base64
import logging
import os

from cryptography.fernet import Fernet, InvalidToken

logger = logging.getLogger(__name__)

# Development key; set ENCRYPTION_KEY in production
DEVELOPMENT_KEY = 'kJ3yq0V9rXhN0c2p8mY4Zb6tQe1LwU5sGf7aRd3Ho_M='

class PasswordEncryption:
    """Handle password encryption and decryption"""

    def __init__(self, key=None):
        key = key or os.environ.get('ENCRYPTION_KEY')
        if not key:
            key = DEVELOPMENT_KEY
            logger.warning("ENCRYPTION_KEY not set, using the development encryption key")

        if isinstance(key, str):
            key = key.encode()

        self.cipher_suite = Fernet(key)

    def encrypt_password(self, password):
        """Encrypt a password for storage"""
        encrypted_password = self.cipher_suite.encrypt(password.encode())
        return base64.urlsafe_b64encode(encrypted_password).decode()

    def decrypt_password(self, encrypted_password):
        """Decrypt a password for display, None when the token is unreadable"""
        try:
            encrypted_bytes = base64.urlsafe_b64decode(encrypted_password.encode())
            return self.cipher_suite.decrypt(encrypted_bytes).decode()
        except (InvalidToken, ValueError):
            logger.error("Stored password could not be decrypted")
            return None

# Global instance
password_encryptor = PasswordEncryption()
