"""
Stormwatch — Rainfall Intensity Monitoring & Storm Alerting.

Architecture:
    stormwatch/
    ├── api/             # FastAPI routers (HTTP layer)
    ├── auth/            # API key and access code checks
    ├── middleware/      # Error handling, request context, security headers
    ├── schemas/         # Pydantic request/response models
    ├── services/        # Subscriber list, URL sanitizing
    └── monitoring/      # Core: reading window, classifier, alert state machine, dispatch

Data Flow:
    Ingest → Reading Window → Intensity Classifier → Alert State Machine
    → Alert Dispatcher → Integrations (email, webhook, log)

Version: 1.0.0
"""

__version__ = "1.0.0"
