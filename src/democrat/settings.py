import os

ENVIRONMENT = os.environ.get("ENVIRONMENT", "localhost")

# DIP registry (Dokumentations- und Informationssystem fuer Parlamentsmaterialien)
DIP_API_KEY = os.environ.get("DIP_API_KEY", None)
DIP_BASE_URL = os.environ.get("DIP_BASE_URL", "https://search.dip.bundestag.de/api/v1")
DIP_DRUCKSACHETYP = os.environ.get("DIP_DRUCKSACHETYP", "Gesetzentwurf")
DIP_ZUORDNUNG = os.environ.get("DIP_ZUORDNUNG", "BT")
DIP_REQUEST_TIMEOUT = float(os.environ.get("DIP_REQUEST_TIMEOUT", "30"))

# Qdrant configuration
QDRANT_URL = os.environ.get("QDRANT_URL", "http://localhost:6333")
QDRANT_API_KEY = os.environ.get("QDRANT_API_KEY", None)
QDRANT_COLLECTION_NAME = os.environ.get("QDRANT_COLLECTION_NAME", "drucksachen")
QDRANT_TIMEOUT = int(os.environ.get("QDRANT_TIMEOUT", "60"))

# OpenAI configuration
OPENAI_API_KEY = os.environ.get("OPENAI_API_KEY", None)
OPENAI_CHAT_MODEL = os.environ.get("OPENAI_CHAT_MODEL", "gpt-4o-mini")
OPENAI_EMBEDDING_MODEL = os.environ.get("OPENAI_EMBEDDING_MODEL", "text-embedding-3-small")
EMBEDDING_DIMENSIONS = int(os.environ.get("EMBEDDING_DIMENSIONS", "1536"))

# Prompt and embedding input limits (characters)
SUMMARY_TEXT_LIMIT = 15000
CATEGORY_TEXT_LIMIT = 8000
EMBEDDING_TEXT_LIMIT = 10000
EMBEDDING_INPUT_LIMIT = 30000

# Enrichment batch
ENRICHMENT_BATCH_SIZE = int(os.environ.get("ENRICHMENT_BATCH_SIZE", "10"))
ENRICHMENT_DELAY_SECONDS = float(os.environ.get("ENRICHMENT_DELAY_SECONDS", "2.0"))

# Scheduler intervals
SYNC_INTERVAL_SECONDS = int(os.environ.get("SYNC_INTERVAL_SECONDS", str(10 * 60 * 60)))
ENRICHMENT_INTERVAL_SECONDS = int(os.environ.get("ENRICHMENT_INTERVAL_SECONDS", "600"))

# PDF download
PDF_DOWNLOAD_TIMEOUT = float(os.environ.get("PDF_DOWNLOAD_TIMEOUT", "60"))
PDF_USER_AGENT = os.environ.get("PDF_USER_AGENT", "DEMOCRAT-Backend/1.0")
PDF_CACHE_ENABLED = os.environ.get("PDF_CACHE_ENABLED", "false").lower() == "true"
PDF_CACHE_DIR = os.environ.get("PDF_CACHE_DIR", "data/cache/pdf")

# Drucksache store: "disk" persists to REPOSITORY_DIR and is shared between processes
REPOSITORY_BACKEND = os.environ.get("REPOSITORY_BACKEND", "disk")
REPOSITORY_DIR = os.environ.get("REPOSITORY_DIR", "data/drucksachen")

# Run the sync and enrichment scheduler inside the API process
SCHEDULER_ENABLED = os.environ.get("SCHEDULER_ENABLED", "true").lower() == "true"
