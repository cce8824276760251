import os
from dotenv import load_dotenv

load_dotenv()

# API Keys and Config - loaded from .env
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
LOCALIZER_MODEL = os.getenv("LOCALIZER_MODEL", "gpt-5.2")
SHOPIFY_API_KEY = os.getenv("SHOPIFY_API_KEY", "")
SHOPIFY_API_SECRET = os.getenv("SHOPIFY_API_SECRET", "")
SHOPIFY_REDIRECT_URI = os.getenv("SHOPIFY_REDIRECT_URI", "")
SHOPIFY_SCOPES = os.getenv("SHOPIFY_SCOPES", "read_products,read_inventory")
SHOPIFY_API_VERSION = os.getenv("SHOPIFY_API_VERSION", "2024-10")
EXPORT_BUCKET = os.getenv("EXPORT_BUCKET")
EXPORT_QUEUE_URL = os.getenv("EXPORT_QUEUE_URL")
TEMPLATES_DIR = os.getenv("TEMPLATES_DIR", "templates")

# Handshake state tokens expire after 10 minutes
STATE_EXPIRATION_SECONDS = int(os.getenv("STATE_EXPIRATION_SECONDS", "600"))

# Localization
DEFAULT_LANGUAGE = "en"
TRANSLATION_WORKERS = int(os.getenv("TRANSLATION_WORKERS", "4"))

# Brand colors used in exported bundles (primary, secondary, accent)
MAX_EXPORT_COLORS = 3
