"""
FastAPI application - checkout development backend

Run: uvicorn src.api.main:app --host 127.0.0.1 --port 8000
"""

from dotenv import load_dotenv

load_dotenv()

import logging
from datetime import datetime

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.endpoints.mock_payments import router as mock_payments_router
from src.checkout.factory import should_use_real_integrations
from src.utils.checkout_config_loader import load_checkout_config

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Load checkout configuration once per process
checkout_cfg = load_checkout_config()

# Initialize FastAPI app
app = FastAPI(
    title="Storefront Checkout API",
    description="Checkout configuration and a mock payment-session backend for local development",
    version="1.0.0",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

if should_use_real_integrations():
    logger.info("Real integrations configured; mock payment endpoints disabled")
else:
    app.include_router(mock_payments_router)


@app.get("/health", tags=["Health"])
async def health_check():
    return {"status": "healthy", "timestamp": datetime.now().isoformat()}


@app.get("/api/v1/checkout/config", tags=["Checkout"])
async def checkout_config():
    """What an embedder needs to construct a checkout."""
    return {
        "publishable_key": checkout_cfg.gateway.publishable_key,
        "test_mode": checkout_cfg.checkout.test_mode,
        "currency": checkout_cfg.checkout.currency,
        "restaurant_id": checkout_cfg.checkout.default_restaurant_id,
        "script_url": checkout_cfg.gateway.script_url,
        "return_url": checkout_cfg.checkout.return_url,
    }
