"""Network configuration constants for QuizDesk."""

DEFAULT_HOST: str = "0.0.0.0"
DEFAULT_PORT: int = 8000
ADMIN_KEY_HEADER: str = "x-admin-key"
