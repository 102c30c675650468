# handler.py
"""AWS Lambda entry point for the Smart Budget Tracker API.

Mangum adapts API Gateway HTTP events to ASGI. It does not carry
WebSocket traffic, so the /ws live-update channel is only available
when the app runs under uvicorn; REST clients behind Lambda reconcile
by re-fetching instead.
"""

from mangum import Mangum
from smart_budget.main import app

handler = Mangum(app, lifespan="off")
