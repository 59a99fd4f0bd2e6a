"""
Pytest configuration and fixtures for the series pipeline tests
"""

import pytest
import sys
from pathlib import Path
from loguru import logger

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))


@pytest.fixture(scope="function")
def log_messages():
    """Capture loguru messages emitted during a test"""
    messages = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)


@pytest.fixture(scope="function")
def sample_event():
    """Event as delivered by the event platform fetcher"""
    return {
        "eventId": 4711,
        "eventName": "Padel Cup Aarhus",
        "city": "Aarhus",
        "classes": [
            {"id": 1, "name": "Herrer DPF50 (først til mølle)", "playerCount": 8},
            {"id": 2, "name": "HERRER DPF 50 - FTM", "playerCount": 12},
            {"id": 3, "name": "Dame DPF 25", "playerCount": 6},
            {"id": 4, "name": "Mix DPF100/60"},
            {"id": 5, "name": "Herrer DPF50 - Venteliste", "playerCount": 4},
            {"id": 6, "name": "Finals"},
            {"id": 7, "name": "Drenge U14", "playerCount": 10},
        ],
    }
