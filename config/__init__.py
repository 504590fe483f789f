import os

def get_settings_module() -> str:
    # Lấy giá trị môi trường từ biến APP_ENV, mặc định là 'development'
    env = os.getenv("APP_ENV", "development").lower()

    # 1. Môi trường Production
    if env in {"prod", "production"}:
        return "config.production"

    # 2. Môi trường Testing
    if env in {"test", "testing"}:
        return "config.testing"

    # 3. Mặc định: Development
    return "config.development"


def split_codes(value: str) -> tuple:
    """Comma separated error codes, e.g. 'CORE_TIME_VIOLATION,MAX_HOURS_EXCEEDED'."""
    return tuple(code.strip().upper() for code in (value or "").split(",") if code.strip())
