"""Constants and defaults.

Note: Keep constants here to avoid magic strings spread across code.
"""

# qr payload of the bootstrap session created with every subject
ENROLLMENT_SESSION_QR = "Clase de inscripción"

DATE_FORMAT = "%Y-%m-%d"
DEFAULT_POOL_SIZE = 10
QR_PAYLOAD_BYTES = 24
