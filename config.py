import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 3002)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")

    # Admin access: bearer JWTs with role=admin (token issuance lives outside this service)
    AUTH_DISABLED = bool(data.get("AUTH_DISABLED", False))
    JWT_SECRET_KEY = data.get("JWT_SECRET_KEY", "")
    JWT_ALGORITHM = data.get("JWT_ALGORITHM", "HS256")

    # Invoice store: "sqlite" (embedded file) or "supabase" (remote PostgREST)
    STORE_BACKEND = data.get("STORE_BACKEND", "sqlite")
    SQLITE_PATH = data.get("SQLITE_PATH", os.path.join(ROOT_PATH, "data", "app.db"))
    SUPABASE_URL = data.get("SUPABASE_URL", "")
    SUPABASE_SERVICE_ROLE_KEY = data.get("SUPABASE_SERVICE_ROLE_KEY", "")
    SUPABASE_TABLE = data.get("SUPABASE_TABLE", "invoices")
    REMOTE_TIMEOUT_SECONDS = data.get("REMOTE_TIMEOUT_SECONDS", 10.0)

    # Legacy flat-file snapshot imported once into an empty store
    LEGACY_INVOICES_SNAPSHOT = data.get(
        "LEGACY_INVOICES_SNAPSHOT", os.path.join(ROOT_PATH, "data", "invoices.json")
    )

    # Invoice defaults
    DEFAULT_CURRENCY = data.get("DEFAULT_CURRENCY", "US$")
    DEFAULT_TAX_PERCENT = data.get("DEFAULT_TAX_PERCENT", 10)

    # PDF rendering
    PDF_MAX_ROWS = data.get("PDF_MAX_ROWS", 10)
    UPLOADS_DIR = data.get("UPLOADS_DIR", os.path.join(ROOT_PATH, "uploads"))
    LOGO_PATH = data.get("LOGO_PATH", os.path.join(ROOT_PATH, "public", "logo.jpg"))

    # Business identity merged into every invoice footer
    BUSINESS_NAME = data.get("BUSINESS_NAME", "VR PRODUCTIONS")
    BUSINESS_ADDRESS = data.get("BUSINESS_ADDRESS", "Nagpur, Maharashtra, India")
    BUSINESS_CITY = data.get("BUSINESS_CITY", "")
    BUSINESS_TAX_ID = data.get("BUSINESS_TAX_ID", "")
    BUSINESS_WEBSITE = data.get("BUSINESS_WEBSITE", "")
    BUSINESS_EMAIL = data.get("BUSINESS_EMAIL", "")
    BUSINESS_PHONE = data.get("BUSINESS_PHONE", "")
    BUSINESS_TERMS = data.get(
        "BUSINESS_TERMS", "Please pay within 15 days of receiving this invoice."
    )
